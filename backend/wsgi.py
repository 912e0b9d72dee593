from bookstore import create_app

app = create_app()
