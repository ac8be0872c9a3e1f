"""Publish post changes once the writing transaction commits."""

from functools import partial

from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Post
from .notifications import DELETE, INSERT, UPDATE, publish_change


@receiver(post_save, sender=Post, dispatch_uid="posts.announce_save")
def announce_save(sender, instance, created, raw=False, **kwargs):
    if raw:
        return
    transaction.on_commit(partial(publish_change, INSERT if created else UPDATE, instance.pk))


@receiver(post_delete, sender=Post, dispatch_uid="posts.announce_delete")
def announce_delete(sender, instance, **kwargs):
    transaction.on_commit(partial(publish_change, DELETE, instance.pk))
