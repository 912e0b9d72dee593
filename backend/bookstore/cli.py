# Overview: Flask CLI command groups for bootstrap, seeding, and inspection.

# backend/bookstore/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create all tables (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Catalog:
# - python -m flask books seed
#   Insert the sample catalog if the books table is empty.
# - python -m flask books add --title "Dune" --author "Frank Herbert" --price 12.50 --stock 4
#   Add a single book.
# - python -m flask books list [--title harry]
#   List books, optionally filtered by title substring.
#
# Users:
# - python -m flask users create --first-name Ada --last-name Lovelace --email ada@example.com --password "Password123!"
#   Register a user (prompts if options are omitted).
# - python -m flask users list
#   List registered users.

import click
from flask.cli import with_appcontext

from .extensions import db
from .errors import BookstoreError
from .models import Book, User
from .services import auth_service, books_service
from .validation import format_cents


SAMPLE_BOOKS = [
    ("Harry Potter and the Philosopher's Stone", "J.K. Rowling", "499.00", 12),
    ("Harry Potter and the Chamber of Secrets", "J.K. Rowling", "520.00", 8),
    ("The Hobbit", "J.R.R. Tolkien", "350.00", 10),
    ("Pride and Prejudice", "Jane Austen", "199.00", 5),
    ("To Kill a Mockingbird", "Harper Lee", "299.00", 7),
    ("1984", "George Orwell", "250.00", 0),
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create all tables that don't exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()
    click.echo("BUILD  Recreating schema...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('books')
def books_group():
    """Catalog seeding and inspection."""


@books_group.command('seed')
@with_appcontext
def seed_books():
    """Insert the sample catalog when no books exist."""
    if db.session.query(Book).count():
        click.echo("WARN  Books already present, skipping seed")
        return

    for title, author, price, stock in SAMPLE_BOOKS:
        books_service.create_book(title=title, author=author, price=price, stock_quantity=stock)
    click.echo(f"PASS Seeded {len(SAMPLE_BOOKS)} books")


@books_group.command('add')
@click.option('--title', prompt=True)
@click.option('--author', prompt=True)
@click.option('--price', prompt=True)
@click.option('--stock', 'stock_quantity', type=int, default=0, show_default=True)
@with_appcontext
def add_book(title, author, price, stock_quantity):
    """Add a single book to the catalog."""
    try:
        book = books_service.create_book(
            title=title, author=author, price=price, stock_quantity=stock_quantity
        )
    except BookstoreError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Created book {book.id}: {book.title}")


@books_group.command('list')
@click.option('--title', default=None, help='Case-insensitive title substring')
@with_appcontext
def list_books(title):
    """List books with price and stock."""
    books = books_service.list_books(title=title)

    if not books:
        click.echo("No books found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<5} {'Title':<45} {'Author':<20} {'Price':>10} {'Stock':>7}")
    click.echo("="*90)
    for book in books:
        click.echo(
            f"{book.id:<5} {book.title[:45]:<45} {book.author[:20]:<20} "
            f"{format_cents(book.price_cents):>10} {book.stock_quantity:>7}"
        )
    click.echo("")


@click.group('users')
def users_group():
    """User inspection and bootstrap."""


@users_group.command('create')
@click.option('--first-name', prompt=True)
@click.option('--last-name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_user(first_name, last_name, email, password):
    """Register a user from the command line."""
    try:
        user = auth_service.register_user(
            first_name=first_name, last_name=last_name, email=email, password=password
        )
    except BookstoreError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS Created user {user.id}: {user.email}")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all registered users."""
    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Name':<30} {'Email':<40}")
    click.echo("="*80)
    for user in users:
        click.echo(f"{user.id:<5} {(user.first_name + ' ' + user.last_name)[:30]:<30} {user.email:<40}")
    click.echo("")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(books_group)
    app.cli.add_command(users_group)
