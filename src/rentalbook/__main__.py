from rentalbook.cli import app

app()
