from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all
from backend.app.models.user import User  # noqa: F401
from backend.app.models.company_profile import CompanyProfile  # noqa: F401
from backend.app.models.client import Client  # noqa: F401
from backend.app.models.invoice import Invoice  # noqa: F401
from backend.app.models.invoice_item import InvoiceItem  # noqa: F401
from backend.app.models.quotation import Quotation  # noqa: F401
from backend.app.models.quotation_item import QuotationItem  # noqa: F401
from backend.app.models.quotation_term import QuotationTerm  # noqa: F401
from backend.app.models.quotation_document import QuotationDocument  # noqa: F401
from backend.app.models.document import Document  # noqa: F401
from backend.app.models.master_item import MasterItem  # noqa: F401
from backend.app.models.master_term import MasterTerm  # noqa: F401
from backend.app.models.company_item import CompanyItem  # noqa: F401
from backend.app.models.company_term import CompanyTerm  # noqa: F401
from backend.app.models.material_usage import MaterialUsage  # noqa: F401
from backend.app.models.subscription_plan import SubscriptionPlan  # noqa: F401
from backend.app.models.tax_rate import TaxRate  # noqa: F401
from backend.app.models.template import Template  # noqa: F401
