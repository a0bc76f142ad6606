from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction, connection
from django.core.management.color import no_style
from apps.catalog.models import Category, Product, ProductCategory
from apps.users.models import Role, User

IMG_BASE = "https://raw.githubusercontent.com/devsuperior/dscatalog-resources/master/backend/img"
LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua."
)

CATEGORIES = [
    (1, "Livros"),
    (2, "Eletrônicos"),
    (3, "Computadores"),
]

PRODUCTS = [
    (1, "The Lord of the Rings", 90.5, f"{IMG_BASE}/1-big.jpg", ["Livros"]),
    (2, "Smart TV", 2190.0, f"{IMG_BASE}/2-big.jpg", ["Eletrônicos", "Computadores"]),
    (3, "Macbook Pro", 1250.0, f"{IMG_BASE}/3-big.jpg", ["Computadores"]),
    (4, "PC Gamer", 1200.0, f"{IMG_BASE}/4-big.jpg", ["Computadores"]),
    (5, "Rails for Dummies", 100.99, f"{IMG_BASE}/5-big.jpg", ["Livros"]),
    (6, "PC Gamer Ex", 1350.0, f"{IMG_BASE}/6-big.jpg", ["Computadores"]),
    (7, "PC Gamer X", 1350.0, f"{IMG_BASE}/7-big.jpg", ["Computadores"]),
    (8, "PC Gamer Alfa", 1850.0, f"{IMG_BASE}/8-big.jpg", ["Computadores"]),
    (9, "PC Gamer Tera", 1950.0, f"{IMG_BASE}/9-big.jpg", ["Computadores"]),
    (10, "PC Gamer Y", 1700.0, f"{IMG_BASE}/10-big.jpg", ["Computadores"]),
    (11, "PC Gamer Nitro", 1450.0, f"{IMG_BASE}/11-big.jpg", ["Computadores"]),
    (12, "PC Gamer Card", 1850.0, f"{IMG_BASE}/12-big.jpg", ["Computadores"]),
    (13, "PC Gamer Plus", 1350.0, f"{IMG_BASE}/13-big.jpg", ["Computadores"]),
    (14, "PC Gamer Hera", 2250.0, f"{IMG_BASE}/14-big.jpg", ["Computadores"]),
    (15, "PC Gamer Weed", 2200.0, f"{IMG_BASE}/15-big.jpg", ["Computadores"]),
]

ROLES = ["ROLE_CLIENT", "ROLE_ADMIN"]

USERS = [
    {
        "id": 1,
        "name": "Maria Brown",
        "email": "maria@gmail.com",
        "phone": "988888888",
        "birth_date": "2001-07-25",
        "password": "123456",
        "roles": ["ROLE_CLIENT"],
    },
    {
        "id": 2,
        "name": "Alex Green",
        "email": "alex@gmail.com",
        "phone": "977777777",
        "birth_date": "1987-12-13",
        "password": "123456",
        "roles": ["ROLE_CLIENT", "ROLE_ADMIN"],
    },
]


class Command(BaseCommand):
    help = "Seed the database with the DSCommerce demo catalog, roles and users."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing catalog and user data before seeding",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        def reset_sequences(models):
            """Reset database sequences for given models (PostgreSQL, etc.)."""
            sql_list = connection.ops.sequence_reset_sql(no_style(), models)
            if not sql_list:
                return
            with connection.cursor() as cursor:
                for sql in sql_list:
                    cursor.execute(sql)

        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            ProductCategory.objects.all().delete()
            Product.objects.all().delete()
            Category.objects.all().delete()
            User.objects.all().delete()
            Role.objects.all().delete()

        self.stdout.write("Seeding categories...")
        name_to_cat = {}
        for cid, name in CATEGORIES:
            cat, _ = Category.objects.get_or_create(id=cid, defaults={"name": name})
            name_to_cat[name] = cat

        self.stdout.write("Seeding products...")
        for pid, name, price, img_url, cat_names in PRODUCTS:
            product, _ = Product.objects.get_or_create(
                id=pid,
                defaults=dict(
                    name=name,
                    price=Decimal(str(price)),
                    description=LOREM,
                    img_url=img_url,
                ),
            )
            for cname in cat_names:
                ProductCategory.objects.get_or_create(
                    product=product, category=name_to_cat[cname]
                )

        self.stdout.write("Seeding roles...")
        roles = {
            authority: Role.objects.get_or_create(authority=authority)[0]
            for authority in ROLES
        }

        self.stdout.write("Seeding users...")
        for payload in USERS:
            attrs = dict(payload)
            user_id = attrs.pop("id")
            raw_password = attrs.pop("password")
            authorities = attrs.pop("roles")
            defaults = {
                "username": attrs["email"],
                "email": attrs["email"],
                "name": attrs["name"],
                "phone": attrs["phone"],
                "birth_date": attrs["birth_date"],
            }
            user, created = User.objects.get_or_create(id=user_id, defaults=defaults)
            if not created:
                for field, value in defaults.items():
                    setattr(user, field, value)
            user.set_password(raw_password)
            user.save()
            user.roles.set([roles[a] for a in authorities])

        # Explicit ids were inserted; move sequences past them
        reset_sequences([Category, Product, User])

        self.stdout.write(self.style.SUCCESS("DSCommerce seed completed."))
