"""Reference data loaded at startup: plans, tax rates, templates and the master catalog.

Every row is inserted only if its natural key is absent, so running the seed
again never duplicates or overwrites anything.
"""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.db.unit_of_work import unit_of_work
from backend.app.models.master_item import MasterItem
from backend.app.models.master_term import MasterTerm
from backend.app.models.subscription_plan import SubscriptionPlan
from backend.app.models.tax_rate import TaxRate
from backend.app.models.template import Template

logger = logging.getLogger(__name__)

DEFAULT_PLANS = [
    {
        "id": "free",
        "name": "Free Plan",
        "price": Decimal("0"),
        "interval": "monthly",
        "features": ["5 clients", "10 invoices/month", "Basic templates", "PDF generation"],
        "invoice_quota": 10,
        "quote_quota": 5,
        "material_records_limit": 50,
        "includes_central_masters": False,
    },
    {
        "id": "monthly",
        "name": "Professional",
        "price": Decimal("9.99"),
        "interval": "monthly",
        "features": ["Unlimited clients", "Unlimited invoices", "All templates", "Excel import", "No branding"],
        "invoice_quota": -1,
        "quote_quota": -1,
        "material_records_limit": -1,
        "includes_central_masters": True,
    },
    {
        "id": "yearly",
        "name": "Professional (Yearly)",
        "price": Decimal("99.99"),
        "interval": "yearly",
        "features": ["Unlimited clients", "Unlimited invoices", "All templates", "Excel import", "No branding", "2 months free"],
        "invoice_quota": -1,
        "quote_quota": -1,
        "material_records_limit": -1,
        "includes_central_masters": True,
    },
    {
        "id": "per-invoice",
        "name": "Pay as you go",
        "price": Decimal("19.99"),
        "interval": "one-time",
        "features": ["10 invoices bundle", "All templates", "Excel import", "No branding", "Valid for 1 month"],
        "invoice_quota": 10,
        "quote_quota": 5,
        "material_records_limit": 50,
        "includes_central_masters": False,
    },
]

DEFAULT_TAX_RATES = [
    ("United Kingdom", "GB", "VAT", "20.00"),
    ("United States", "US", "Sales Tax", "0.00"),
    ("Germany", "DE", "VAT", "19.00"),
    ("France", "FR", "VAT", "20.00"),
    ("Japan", "JP", "Consumption Tax", "10.00"),
    ("Canada", "CA", "GST", "5.00"),
    ("Australia", "AU", "GST", "10.00"),
    ("Italy", "IT", "VAT", "22.00"),
    ("Spain", "ES", "VAT", "21.00"),
    ("Netherlands", "NL", "VAT", "21.00"),
]

DEFAULT_TEMPLATES = [
    ("classic", "Classic", "https://images.unsplash.com/photo-1616531770192-6eaea74c2456", True, False),
    ("modern-blue", "Modern Blue", "https://images.unsplash.com/photo-1586892477838-2b96e85e0f96", False, False),
    ("executive", "Executive", "https://images.unsplash.com/photo-1618044733300-9472054094ee", False, True),
    ("minimal", "Minimal", "https://images.unsplash.com/photo-1636633762833-5d1658f1e29b", False, False),
    ("dynamic", "Dynamic", "https://images.unsplash.com/photo-1586282391129-76a6df230234", False, True),
    ("geometric", "Geometric", "https://images.unsplash.com/photo-1542621334-a254cf47733d", False, True),
]

DEFAULT_MASTER_TERMS = [
    ("Payment", "Net 30", "Payment is due within 30 days from the invoice date."),
    ("Payment", "Net 15", "Payment is due within 15 days from the invoice date."),
    ("Payment", "50% Advance", "50% payment is due in advance, with the remaining balance due upon delivery."),
    ("Delivery", "Standard Delivery", "Delivery will be made within 10-15 business days from order confirmation."),
    ("Warranty", "Standard Warranty", "All products come with a standard 12-month warranty against manufacturing defects."),
    (
        "Refund",
        "No Refund Policy",
        "All sales are final. No refunds will be issued once services have been rendered or products delivered.",
    ),
]

DEFAULT_MASTER_ITEMS = [
    ("MAT-001", "Standard Steel Beam", "Standard structural steel I-beam, Grade A36", "Material", "m", "45.00"),
    ("MAT-002", "Portland Cement", "General purpose Portland cement, Type I/II", "Material", "kg", "0.15"),
    ("MAT-003", "Copper Pipe", "Type L copper pipe, 3/4 inch diameter", "Material", "m", "12.50"),
    ("SRV-001", "Engineering Consultation", "Professional engineering consultation services", "Service", "hour", "85.00"),
    ("SRV-002", "Installation Service", "Standard installation service by certified technician", "Service", "hour", "65.00"),
    ("SRV-003", "Project Management", "Project management and coordination services", "Service", "day", "450.00"),
]


def _seed_plans(db: Session) -> int:
    created = 0
    for plan in DEFAULT_PLANS:
        if db.get(SubscriptionPlan, plan["id"]) is None:
            db.add(SubscriptionPlan(is_active=True, **plan))
            created += 1
    return created


def _seed_tax_rates(db: Session) -> int:
    created = 0
    for country, code, name, rate in DEFAULT_TAX_RATES:
        exists = db.query(TaxRate).filter(TaxRate.country_code == code, TaxRate.name == name).first()
        if exists is None:
            db.add(TaxRate(country=country, country_code=code, name=name, rate=Decimal(rate), is_default=True))
            created += 1
    return created


def _seed_templates(db: Session) -> int:
    created = 0
    for template_id, name, preview_url, is_default, is_premium in DEFAULT_TEMPLATES:
        if db.get(Template, template_id) is None:
            db.add(
                Template(
                    id=template_id,
                    name=name,
                    type="invoice",
                    preview_url=preview_url,
                    is_default=is_default,
                    is_premium=is_premium,
                )
            )
            created += 1
    return created


def _seed_master_terms(db: Session) -> int:
    created = 0
    for category, title, content in DEFAULT_MASTER_TERMS:
        exists = db.query(MasterTerm).filter(MasterTerm.category == category, MasterTerm.title == title).first()
        if exists is None:
            db.add(MasterTerm(category=category, title=title, content=content, is_active=True))
            created += 1
    return created


def _seed_master_items(db: Session) -> int:
    created = 0
    for code, name, description, category, unit, price in DEFAULT_MASTER_ITEMS:
        if db.query(MasterItem).filter(MasterItem.code == code).first() is None:
            db.add(
                MasterItem(
                    code=code,
                    name=name,
                    description=description,
                    category=category,
                    unit_of_measure=unit,
                    default_price=Decimal(price),
                    is_active=True,
                )
            )
            created += 1
    return created


def seed_reference_data(db: Session) -> dict:
    """Insert any missing reference rows and return how many were created per kind."""
    try:
        with unit_of_work(db):
            counts = {
                "subscription_plans": _seed_plans(db),
                "tax_rates": _seed_tax_rates(db),
                "templates": _seed_templates(db),
                "master_terms": _seed_master_terms(db),
                "master_items": _seed_master_items(db),
            }
            db.flush()
    except Exception:
        logger.exception("Seeding reference data failed")
        raise
    logger.info("Seeded reference data: %s", counts)
    return counts
