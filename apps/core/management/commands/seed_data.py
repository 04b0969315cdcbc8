"""
Seed management command.

Populates the database with demo data:
  - 3 agencies (Paris, Lille, Marseille)
  - 4 vehicles, one of them withdrawn from rental
  - 2 clients and 2 back-office employees, each with a login
  - 4 reservations spread around today, with their payments and reviews

Logins:
    admin@agence.com        / admin123   (administrator)
    employe@agence.com      / employe123 (employee)
    jean.dupont@email.com   / client123
    marie.martin@email.com  / client123

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed
"""
from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.agencies.models import Agency
from apps.clients.models import Client
from apps.payments.models import Payment, PaymentMethod, PaymentStatus
from apps.reservations import pricing
from apps.reservations.models import Reservation, ReservationStatus, ReservationStatusLog
from apps.reviews.models import Review
from apps.staff.models import Employee, EmployeeRole
from apps.vehicles.models import FuelType, Transmission, Vehicle, VehicleCategory

User = get_user_model()


class Command(BaseCommand):
    help = 'Seed demo agencies, vehicles, clients, employees and reservations'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete all existing data before creating fresh records',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing existing data...')
            Review.objects.all().delete()
            Payment.objects.all().delete()
            Reservation.objects.all().delete()
            Client.objects.all().delete()
            Employee.all_objects.all().purge()
            Vehicle.all_objects.all().purge()
            Agency.all_objects.all().purge()
            User.objects.filter(is_superuser=False).delete()

        today = timezone.localdate()

        # ── Agencies ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding agencies...')
        agencies_data = [
            {'name': 'Agence Centrale', 'address': '100 Boulevard Principal, Paris',
             'phone': '0145678901', 'email': 'contact@agence.com',
             'opening_hours': '8h-18h du lundi au samedi'},
            {'name': 'Agence Nord', 'address': '25 Avenue du Nord, Lille',
             'phone': '0320456789', 'email': 'lille@agence.com',
             'opening_hours': '9h-19h du lundi au dimanche'},
            {'name': 'Agence Sud', 'address': '50 Boulevard de la Méditerranée, Marseille',
             'phone': '0491234567', 'email': 'marseille@agence.com',
             'opening_hours': '8h-20h du lundi au samedi'},
        ]
        agencies = []
        for a in agencies_data:
            agency, _ = Agency.objects.get_or_create(
                name=a['name'],
                defaults={k: v for k, v in a.items() if k != 'name'},
            )
            agencies.append(agency)
        central, north, south = agencies
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(agencies)} agencies created'))

        # ── Vehicles ──────────────────────────────────────────────────────────
        self.stdout.write('Seeding vehicles...')
        vehicles_data = [
            {'brand': 'Toyota', 'model': 'Yaris', 'agency': central,
             'category': VehicleCategory.ECONOMY, 'daily_rate': Decimal('25'), 'is_available': True,
             'fuel': FuelType.PETROL, 'transmission': Transmission.MANUAL, 'seats': 5,
             'description': 'Economical car, perfect for city driving.',
             'equipment': ['Air conditioning', 'Radio', 'Bluetooth'],
             'mileage': 45000, 'year': 2022},
            {'brand': 'Renault', 'model': 'Clio', 'agency': north,
             'category': VehicleCategory.COMPACT, 'daily_rate': Decimal('30'), 'is_available': True,
             'fuel': FuelType.DIESEL, 'transmission': Transmission.AUTOMATIC, 'seats': 5,
             'description': 'Comfortable compact with modern equipment.',
             'equipment': ['GPS', 'Air conditioning', 'Reversing camera'],
             'mileage': 32000, 'year': 2023},
            {'brand': 'BMW', 'model': 'Série 3', 'agency': central,
             'category': VehicleCategory.SEDAN, 'daily_rate': Decimal('65'), 'is_available': False,
             'fuel': FuelType.PETROL, 'transmission': Transmission.AUTOMATIC, 'seats': 5,
             'description': 'Premium sedan for maximum comfort.',
             'equipment': ['GPS', 'Leather seats', 'Sunroof', 'Premium audio'],
             'mileage': 28000, 'year': 2023},
            {'brand': 'Tesla', 'model': 'Model 3', 'agency': south,
             'category': VehicleCategory.LUXURY, 'daily_rate': Decimal('85'), 'is_available': True,
             'fuel': FuelType.ELECTRIC, 'transmission': Transmission.AUTOMATIC, 'seats': 5,
             'description': 'High-end electric vehicle.',
             'equipment': ['Autopilot', 'Touchscreen', 'Supercharger access'],
             'mileage': 15000, 'year': 2024},
        ]
        vehicles = []
        for v in vehicles_data:
            vehicle, _ = Vehicle.objects.get_or_create(
                brand=v['brand'], model=v['model'],
                defaults={k: val for k, val in v.items() if k not in ('brand', 'model')},
            )
            vehicles.append(vehicle)
        yaris, clio, _bmw, tesla = vehicles
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(vehicles)} vehicles created'))

        # ── Clients ───────────────────────────────────────────────────────────
        self.stdout.write('Seeding clients...')
        clients_data = [
            {'first_name': 'Jean', 'last_name': 'Dupont', 'email': 'jean.dupont@email.com',
             'phone': '0123456789', 'birth_date': date(1985, 5, 15), 'licence_number': '123456789',
             'address': '123 Rue de la Paix, Paris', 'loyalty_points': 150},
            {'first_name': 'Marie', 'last_name': 'Martin', 'email': 'marie.martin@email.com',
             'phone': '0987654321', 'birth_date': date(1990, 8, 22), 'licence_number': '987654321',
             'address': '456 Avenue des Champs, Lyon', 'loyalty_points': 75},
        ]
        clients = []
        for c in clients_data:
            user = self._user(c['email'], 'client123', c['first_name'], c['last_name'])
            client, _ = Client.objects.get_or_create(
                email=c['email'],
                defaults={'user': user, **{k: v for k, v in c.items() if k != 'email'}},
            )
            clients.append(client)
        jean, marie = clients
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(clients)} clients created (password: client123)'))

        # ── Employees ─────────────────────────────────────────────────────────
        self.stdout.write('Seeding employees...')
        employees_data = [
            {'first_name': 'Super', 'last_name': 'Admin', 'email': 'admin@agence.com',
             'password': 'admin123', 'role': EmployeeRole.ADMIN, 'hired_on': date(2020, 1, 1)},
            {'first_name': 'Test', 'last_name': 'Employe', 'email': 'employe@agence.com',
             'password': 'employe123', 'role': EmployeeRole.EMPLOYEE, 'hired_on': date(2022, 6, 15)},
        ]
        for e in employees_data:
            user = self._user(e['email'], e['password'], e['first_name'], e['last_name'], staff=True)
            Employee.objects.get_or_create(
                email=e['email'],
                defaults={
                    'user': user, 'agency': central, 'role': e['role'], 'hired_on': e['hired_on'],
                    'first_name': e['first_name'], 'last_name': e['last_name'],
                },
            )
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(employees_data)} employees created'))

        # ── Reservations, payments, reviews ───────────────────────────────────
        self.stdout.write('Seeding reservations...')
        reservations_data = [
            # (client, vehicle, start offset, end offset, options, status, payment status, review)
            (jean, yaris, -14, -9, {'gps': True}, ReservationStatus.COMPLETED, PaymentStatus.PAID,
             (5, 'Excellent car, very economical and reliable!')),
            (marie, clio, -10, -6, {'full_insurance': True, 'child_seat': True},
             ReservationStatus.COMPLETED, PaymentStatus.PAID,
             (4, 'Good car, comfortable for city trips.')),
            (marie, clio, -1, 3, {}, ReservationStatus.IN_PROGRESS, PaymentStatus.PENDING, None),
            (jean, tesla, 7, 10, {'gps': True, 'extra_driver': True},
             ReservationStatus.CONFIRMED, PaymentStatus.PENDING, None),
        ]
        created = 0
        for client, vehicle, start_off, end_off, opts, status, pay_status, review in reservations_data:
            start = today + timedelta(days=start_off)
            end = today + timedelta(days=end_off)
            if Reservation.objects.filter(client=client, vehicle=vehicle, start_date=start).exists():
                continue
            reservation = Reservation.objects.create(
                client=client, vehicle=vehicle, start_date=start, end_date=end,
                total_price=pricing.calculate_total(vehicle.daily_rate, start, end, opts),
                status=status,
                **{key: bool(opts.get(key)) for key in pricing.OPTION_DAILY_PRICES},
            )
            ReservationStatusLog.objects.create(
                reservation=reservation, from_status='', to_status=ReservationStatus.CONFIRMED,
                changed_by='seed', reason='Demo data',
            )
            if status != ReservationStatus.CONFIRMED:
                ReservationStatusLog.objects.create(
                    reservation=reservation, from_status=ReservationStatus.CONFIRMED,
                    to_status=status, changed_by='seed', reason='Demo data',
                )
            Payment.objects.create(
                reservation=reservation,
                amount=reservation.total_price,
                status=pay_status,
                method=PaymentMethod.CARD,
                paid_on=timezone.now() - timedelta(days=-start_off) if pay_status == PaymentStatus.PAID else None,
                recorded_by='seed',
            )
            if review:
                rating, comment = review
                Review.objects.create(
                    client=client, vehicle=vehicle, reservation=reservation,
                    rating=rating, comment=comment,
                )
            created += 1
        self.stdout.write(self.style.SUCCESS(f'  ✔ {created} reservations created with payments and reviews'))

        self.stdout.write(self.style.SUCCESS(
            f'\n✅ Seed complete! {len(agencies)} agencies, {len(vehicles)} vehicles, '
            f'{len(clients)} clients ready.'
        ))

    def _user(self, email, password, first_name, last_name, staff=False):
        user, created = User.objects.get_or_create(
            username=email,
            defaults={'email': email, 'first_name': first_name, 'last_name': last_name, 'is_staff': staff},
        )
        if created:
            user.set_password(password)
            user.save(update_fields=['password'])
        return user
