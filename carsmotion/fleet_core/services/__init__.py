from .backup import export_backup, reset_all_data, restore_backup
from .conflicts import ensure_available, find_conflicts, has_overlap
from .invoicing import (cancel_invoice, create_invoice,
                        create_invoice_for_reservation, mark_invoice_paid,
                        next_invoice_number)
from .ledger import (generate_monthly_vehicle_expenses,
                     record_maintenance_expense, record_reservation_income)
from .lifecycle import (derive_vehicle_status, on_reservation_status_change,
                        reconcile_vehicle_statuses)
from .maintenance import (delete_maintenance, record_maintenance,
                          update_maintenance)
from .pricing import compute_reservation_total, compute_tax, rental_days
from .reports import cash_book, dashboard_stats, maintenance_alerts
from .reservations import (cancel_reservation, change_reservation_status,
                           complete_reservation, confirm_reservation,
                           delete_reservation, quote_reservation,
                           save_reservation)
