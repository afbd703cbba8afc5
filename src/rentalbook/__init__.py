"""rentalbook: an Excel workbook as the database for a vehicle-rental desk."""

__version__ = "0.1.0"
