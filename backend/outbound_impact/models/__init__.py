# Import models here so Base.metadata knows every table.
from outbound_impact.models.organization import Organization  # noqa: F401
from outbound_impact.models.user import User  # noqa: F401
from outbound_impact.models.uploaded_file import UploadedFile  # noqa: F401
from outbound_impact.models.qr_code import QRCode  # noqa: F401
from outbound_impact.models.qr_scan_event import QRScanEvent  # noqa: F401
from outbound_impact.models.campaign import Campaign  # noqa: F401
from outbound_impact.models.activity_log import ActivityLogEntry  # noqa: F401

# Internal staff, outside any organization
from outbound_impact.models.admin_user import AdminUser  # noqa: F401
