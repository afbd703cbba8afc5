"""The four entity kinds kept in the workbook and their column layouts."""

from __future__ import annotations

from rentalbook.codec import as_number, as_text
from rentalbook.models import EntityDefinition, FieldSpec, TableSchema

VEHICLES = EntityDefinition(
    name="vehicles",
    schema=TableSchema(
        sheet_name="Vehicles",
        table_name="tblVehicles",
        headers=("Plate", "Make", "Model", "Year", "Transmission", "Rate", "Status"),
    ),
    fields=(
        FieldSpec("Plate", as_text),
        FieldSpec("Make", as_text),
        FieldSpec("Model", as_text),
        FieldSpec("Year", as_number, 0),
        FieldSpec("Transmission", as_text),
        FieldSpec("Rate", as_number, 0),
        FieldSpec("Status", as_text, "Available"),
    ),
)

CUSTOMERS = EntityDefinition(
    name="customers",
    schema=TableSchema(
        sheet_name="Customers",
        table_name="tblCustomers",
        headers=("Name", "Phone", "Email", "ID Type", "ID No"),
    ),
    fields=(
        FieldSpec("Name", as_text),
        FieldSpec("Phone", as_text),
        FieldSpec("Email", as_text),
        FieldSpec("ID Type", as_text, aliases=("idType",)),
        FieldSpec("ID No", as_text, aliases=("idNo",)),
    ),
)

RENTALS = EntityDefinition(
    name="rentals",
    schema=TableSchema(
        sheet_name="Rentals",
        table_name="tblRentals",
        headers=(
            "Rental ID",
            "Customer ID",
            "Vehicle Plate",
            "Start Date",
            "Due Date",
            "Actual Return",
            "Daily Rate",
            "Amount",
            "Status",
        ),
    ),
    fields=(
        FieldSpec("Rental ID", as_text, aliases=("rentalId",)),
        FieldSpec("Customer ID", as_text, aliases=("customerId", "customer", "customerName")),
        FieldSpec("Vehicle Plate", as_text, aliases=("vehiclePlate", "vehicle")),
        FieldSpec("Start Date", as_text, aliases=("startDate",)),
        FieldSpec("Due Date", as_text, aliases=("dueDate",)),
        FieldSpec("Actual Return", as_text, aliases=("actualReturn",)),
        FieldSpec("Daily Rate", as_number, 0, aliases=("dailyRate",)),
        FieldSpec("Amount", as_number, 0),
        FieldSpec("Status", as_text, "Ongoing"),
    ),
)

MAINTENANCE = EntityDefinition(
    name="maintenance",
    schema=TableSchema(
        sheet_name="Maintenance",
        table_name="tblMaintenance",
        headers=("Date", "Vehicle Plate", "Type", "Odometer", "Cost", "Description"),
    ),
    fields=(
        FieldSpec("Date", as_text),
        FieldSpec("Vehicle Plate", as_text, aliases=("vehiclePlate",)),
        FieldSpec("Type", as_text),
        FieldSpec("Odometer", as_number, 0),
        FieldSpec("Cost", as_number, 0),
        FieldSpec("Description", as_text, aliases=("desc",)),
    ),
)

ENTITIES: tuple[EntityDefinition, ...] = (VEHICLES, CUSTOMERS, RENTALS, MAINTENANCE)


def entity_by_name(name: str, entities: tuple[EntityDefinition, ...] = ENTITIES) -> EntityDefinition:
    """Return the entity called *name* (case-insensitive).

    Raises
    ------
    KeyError
        If no entity has that name.
    """
    wanted = name.strip().lower()
    for entity in entities:
        if entity.name.lower() == wanted:
            return entity
    known = ", ".join(e.name for e in entities)
    raise KeyError(f"Unknown entity {name!r}. Use one of: {known}")
