from django.core.management.base import BaseCommand, CommandError
from firebase_admin import auth

from core.firebase import get_auth_client


class Command(BaseCommand):
    help = 'Set the password of an existing Firebase Auth account'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='E-mail of the account to update')
        parser.add_argument('--password', required=True, help='New password (min. 6 characters)')

    def handle(self, *args, **options):
        email = options['email'].strip().lower()
        password = options['password']
        if len(password) < 6:
            raise CommandError('Password must be at least 6 characters')

        client = get_auth_client()
        try:
            user = client.get_user_by_email(email)
        except auth.UserNotFoundError:
            raise CommandError(f'No account found with email {email}. Sign up first with Google or email/password.')

        providers = [info.provider_id for info in user.provider_data]
        self.stdout.write(f'Found account {user.uid} (providers: {", ".join(providers) or "none"})')

        if 'password' in providers:
            client.update_user(user.uid, password=password)
            self.stdout.write(self.style.SUCCESS('Password updated'))
        else:
            # setting a password on an OAuth-only account adds the email/password provider
            client.update_user(user.uid, password=password, email=email, email_verified=True)
            self.stdout.write(self.style.SUCCESS('Email/password sign-in added to the account'))
            if 'google.com' in providers:
                self.stdout.write('Google sign-in and email/password now share the same account')
