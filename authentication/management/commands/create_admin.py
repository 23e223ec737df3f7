from django.core.management.base import BaseCommand
from authentication.models import CustomUser, ROLE_ADMIN


class Command(BaseCommand):
    help = 'Create an admin (operator) user or promote an existing one'

    def add_arguments(self, parser):
        parser.add_argument('email', type=str, help='Email address of the operator account')
        parser.add_argument('--password', type=str, default=None, help='Password for a newly created account')

    def handle(self, *args, **options):
        email = options['email'].lower()

        try:
            user = CustomUser.objects.get(email__iexact=email)
            user.role = ROLE_ADMIN
            user.save(update_fields=['role', 'updated_at'])
            self.stdout.write(
                self.style.SUCCESS(f'Updated existing user {email} to {ROLE_ADMIN}')
            )
        except CustomUser.DoesNotExist:
            user = CustomUser.objects.create_user(
                username=email,
                email=email,
                password=options['password'],
                role=ROLE_ADMIN,
            )
            self.stdout.write(
                self.style.SUCCESS(f'Created new {ROLE_ADMIN} user: {email}')
            )
            if not options['password']:
                self.stdout.write(
                    self.style.WARNING('\nNo password set. User will sign in with Firebase on first login.')
                )
