from shelfpos import create_app

app = create_app()
