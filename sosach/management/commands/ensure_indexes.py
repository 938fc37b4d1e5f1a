from django.core.management.base import BaseCommand, CommandError

from sosach_project.db.init import initialize_database


class Command(BaseCommand):
    help = "Create MongoDB indexes, including the notification expiry TTL index"

    def add_arguments(self, parser):
        parser.add_argument("--max-retries", type=int, default=5)
        parser.add_argument("--retry-delay", type=int, default=2)

    def handle(self, *args, **options):
        if not initialize_database(options["max_retries"], options["retry_delay"]):
            raise CommandError("Database initialization failed")
        self.stdout.write(self.style.SUCCESS("Indexes ensured"))
