from .agency import AgencySettings
from .auditlog import AuditLog
from .customer import Customer
from .invoice import Invoice
from .ledger import Transaction
from .maintenance import MaintenanceRecord
from .reservation import Reservation
from .vehicle import Vehicle
