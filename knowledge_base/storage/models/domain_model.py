from tortoise import fields, models


class DomainRecord(models.Model):
    """
    Aggregate over a domain's pages, rewritten with every page mutation.
    """
    id = fields.IntField(pk=True)

    domain = fields.CharField(max_length=255, unique=True)
    page_count = fields.IntField(default=0)
    total_size = fields.BigIntField(default=0)

    class Meta:
        table = "kb_domains"
