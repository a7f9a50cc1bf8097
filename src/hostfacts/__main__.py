from hostfacts.cli.app import app

app()
