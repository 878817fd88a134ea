"""Seed the default currency list."""

from django.db import migrations

CURRENCIES = [
    ("USD", "Dólar Estadounidense", "$", "🇺🇸"),
    ("EUR", "Euro", "€", "🇪🇺"),
    ("GBP", "Libra Esterlina", "£", "🇬🇧"),
    ("JPY", "Yen Japonés", "¥", "🇯🇵"),
    ("CAD", "Dólar Canadiense", "C$", "🇨🇦"),
    ("AUD", "Dólar Australiano", "A$", "🇦🇺"),
    ("CHF", "Franco Suizo", "CHF", "🇨🇭"),
    ("CNY", "Yuan Chino", "¥", "🇨🇳"),
    ("MXN", "Peso Mexicano", "$", "🇲🇽"),
    ("BRL", "Real Brasileño", "R$", "🇧🇷"),
    ("ARS", "Peso Argentino", "$", "🇦🇷"),
    ("COP", "Peso Colombiano", "$", "🇨🇴"),
    ("NIO", "Córdoba Nicaragüense", "C$", "🇳🇮"),
]


def create_currencies(apps, schema_editor):
    Currency = apps.get_model("catalog", "Currency")
    for code, name, symbol, flag in CURRENCIES:
        Currency.objects.get_or_create(
            code=code,
            defaults={"name": name, "symbol": symbol, "flag_emoji": flag},
        )


def remove_currencies(apps, schema_editor):
    Currency = apps.get_model("catalog", "Currency")
    Currency.objects.filter(code__in=[c[0] for c in CURRENCIES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_currencies, remove_currencies),
    ]
