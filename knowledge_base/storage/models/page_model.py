from tortoise import fields, models


class PageRecord(models.Model):
    """
    One crawled page. Re-crawling the same URL overwrites the row in place.
    """
    id = fields.IntField(pk=True)
    url = fields.CharField(max_length=2048)
    domain = fields.CharField(max_length=255, index=True)
    content = fields.TextField()
    status = fields.IntField(null=True)
    content_size = fields.IntField(default=0)
    # epoch milliseconds
    timestamp = fields.BigIntField()

    class Meta:
        table = "kb_pages"
        unique_together = (("domain", "url"),)

    def __str__(self):
        return f"{self.url} [{self.status}]"
