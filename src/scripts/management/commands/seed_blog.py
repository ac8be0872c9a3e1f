"""Seed demo authors and posts."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from authentication.managers import UserManager
from posts.models import Post
from posts.services import PostService
from profiles.models import Profile

DEMO_AUTHORS = [
    {
        "email": "ada@example.com",
        "password": "adapass123",
        "username": "ada",
        "full_name": "Ada Lovelace",
        "bio": "Writes about engines, analytical and otherwise.",
    },
    {
        "email": "grace@example.com",
        "password": "gracepass123",
        "username": "grace",
        "full_name": "",
        "bio": None,
    },
]

DEMO_POSTS = {
    "ada@example.com": [
        {
            "title": "Notes on the Analytical Engine",
            "excerpt": "A first look at what a general-purpose engine could compute.",
            "content": "# Notes\n\nThe engine weaves algebraic patterns.",
            "published": True,
        },
        {
            "title": "Draft: Bernoulli numbers",
            "excerpt": "Work in progress.",
            "content": "Table of operations goes here.",
            "published": False,
        },
    ],
    "grace@example.com": [
        {
            "title": "Hello, World!",
            "excerpt": "The obligatory first post.",
            "content": "It's easier to ask forgiveness than it is to get permission.",
            "published": True,
        },
    ],
}


def create_seed_authors() -> dict:
    """Create demo accounts (profiles follow via signal) and return email->User."""
    User = get_user_model()
    authors = {}
    for entry in DEMO_AUTHORS:
        user, created = User.objects.get_or_create(
            email=entry["email"],
            defaults={"password_hash": UserManager.hash_password(entry["password"])},
        )
        Profile.objects.filter(pk=user.pk).update(
            username=entry["username"],
            full_name=entry["full_name"],
            bio=entry["bio"],
        )
        authors[entry["email"]] = user
    return authors


def create_seed_posts(authors: dict) -> list:
    """Create demo posts through the lifecycle service, skipping existing titles."""
    created = []
    for email, posts in DEMO_POSTS.items():
        author = authors[email]
        for fields in posts:
            if Post.objects.filter(author=author, title=fields["title"]).exists():
                continue
            created.append(PostService.create_post(author, fields).post)
    return created


class Command(BaseCommand):
    """Management command to seed demo authors and posts."""

    help = (
        "Seed demo authors and a mix of published and draft posts. "
        "Use --reset to delete previously seeded authors (and their posts) first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the demo accounts, cascading to their profiles and posts.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        if options.get("reset"):
            self._reset_seeded_data()

        self.stdout.write("Seeding demo authors and posts...")
        authors = create_seed_authors()
        posts = create_seed_posts(authors)
        self.stdout.write(self.style.SUCCESS(f"Seed completed: {len(authors)} authors, {len(posts)} new posts."))

    def _reset_seeded_data(self) -> None:
        self.stdout.write("Resetting previously seeded demo data...")
        User = get_user_model()
        User.objects.filter(email__in=[a["email"] for a in DEMO_AUTHORS]).delete()
        self.stdout.write(self.style.WARNING("Seeded demo data cleared."))
