"""Follow the post change feed and re-list published posts on every change."""

from django.core.management.base import BaseCommand

from core.errors import StorageUnavailable
from posts.notifications import PostChangeSubscription
from posts.services import PostService


class Command(BaseCommand):
    """Print the published listing, then refresh it whenever a post changes."""

    help = (
        "Subscribe to post change notifications and re-fetch the published "
        "listing after each one. Stops on Ctrl-C or after --max-events."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--max-events",
            type=int,
            default=None,
            help="Exit after this many change notifications.",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=1.0,
            help="Seconds to wait for each message before polling again.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        self._print_listing()
        try:
            with PostChangeSubscription() as feed:
                self.stdout.write(f"Watching {feed.channel} ...")
                for change in feed.listen(max_events=options["max_events"], timeout=options["timeout"]):
                    self.stdout.write(f"{change.event}: {change.post_id}")
                    self._print_listing()
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING("Stopped."))

    def _print_listing(self) -> None:
        try:
            posts = PostService.list_published()
        except StorageUnavailable as exc:
            self.stderr.write(self.style.ERROR(exc.message))
            return
        self.stdout.write(self.style.SUCCESS(f"{len(posts)} published post(s)"))
        for post in posts:
            self.stdout.write(f"  {post.created_at:%Y-%m-%d %H:%M}  {post.slug}  {post.title}")
