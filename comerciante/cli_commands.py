"""
Flask CLI commands for store maintenance.

Commands:
- flask init-db: Create tables if they do not exist
- flask reset-db: Delete all products, sales and sale items
"""

import click
from comerciante import database
from comerciante.database import get_session, reset_store
from comerciante.exceptions import ComercianteError


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create products, sales and sale_items tables."""
        try:
            database.init_schema(database.engine)
        except ComercianteError as e:
            click.echo(click.style(f'Erro ao criar tabelas: {e.message}', fg='red'))
            raise SystemExit(1)
        click.echo(click.style('Banco de dados pronto.', fg='green'))

    @app.cli.command('reset-db')
    @click.confirmation_option(prompt='Apagar todos os produtos e vendas?')
    def reset_db_command():
        """Delete every product, sale and sale item."""
        try:
            info = reset_store(get_session())
        except ComercianteError as e:
            click.echo(click.style(f'Erro ao limpar banco: {e.message}', fg='red'))
            raise SystemExit(1)

        items, sales, products = info.results
        click.echo(click.style('Banco de dados limpo com sucesso!', fg='green', bold=True))
        click.echo(f'   Itens: {items}  Vendas: {sales}  Produtos: {products}')
