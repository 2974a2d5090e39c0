from django.db import models


class Option(models.Model):
    """A named, JSON-encoded value in the options table."""

    name = models.CharField(max_length=191, unique=True)
    value = models.TextField()
    autoload = models.BooleanField(default=True)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} (v{self.version})"
