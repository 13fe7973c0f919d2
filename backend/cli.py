"""
Order core CLI.

Command-line interface for exercising the order lifecycle locally.
"""

import random
import sys
from decimal import Decimal
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

from order_core import Order, OrderEvent, OrderStore
from shared.config.constants import OrderItemStatus, OrderStatus
from shared.config.logging import setup_logging

app = typer.Typer(
    name="order-core",
    help="Restaurant order lifecycle CLI",
    add_completion=False,
)
console = Console()


DEMO_MENU: list[tuple[str, Decimal]] = [
    ("margherita", Decimal("9.50")),
    ("caesar-salad", Decimal("7.00")),
    ("ribeye", Decimal("24.00")),
    ("lemonade", Decimal("3.25")),
    ("tiramisu", Decimal("6.75")),
]

STATUS_STYLES = {
    OrderStatus.PENDING: "yellow",
    OrderStatus.PREPARING: "dark_orange",
    OrderStatus.READY: "green",
    OrderStatus.SERVED: "blue",
    OrderStatus.CANCELLED: "red",
}


def run_simulation(orders: int, seed: int) -> tuple[OrderStore, list[OrderEvent]]:
    """
    Create demo orders and walk each one to a random point of the kitchen flow.

    Returns the store and every event it published.
    """
    rng = random.Random(seed)
    store = OrderStore()
    events: list[OrderEvent] = []
    store.subscribe(events.append)

    for number in range(orders):
        lines = rng.sample(DEMO_MENU, k=rng.randint(1, 3))
        order = store.create(
            [
                {"menu_item_id": menu_item_id, "quantity": rng.randint(1, 3), "unit_price": price}
                for menu_item_id, price in lines
            ],
            {"table_id": f"T{number % 6 + 1}", "branch_id": "1"},
        )

        stage = rng.randint(0, 4)
        if stage >= 1:
            store.set_item_status(order.id, order.items[0].id, OrderItemStatus.PREPARING)
        if stage >= 2:
            for item in order.items:
                store.set_item_status(order.id, item.id, OrderItemStatus.READY)
        if stage == 3:
            store.set_order_status(order.id, OrderStatus.SERVED)
        if stage == 4:
            store.set_order_status(order.id, OrderStatus.CANCELLED)

    return store, events


def render_orders(title: str, orders: list[Order]) -> Table:
    table = Table(title=title)
    table.add_column("Number", style="cyan")
    table.add_column("Table")
    table.add_column("Status")
    table.add_column("Items")
    table.add_column("Total", justify="right", style="green")

    for order in orders:
        style = STATUS_STYLES.get(order.status, "white")
        items = ", ".join(f"{item.quantity}x {item.menu_item_id} ({item.status})" for item in order.items)
        table.add_row(
            order.label,
            str(order.table_id or "-"),
            f"[{style}]{order.status}[/{style}]",
            items,
            f"{order.total_amount:.2f}",
        )
    return table


# =============================================================================
# Commands
# =============================================================================

@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print store logs to stdout"),
):
    """Restaurant order lifecycle CLI."""
    if verbose:
        setup_logging()


@app.command()
def simulate(
    orders: int = typer.Option(8, "--orders", "-o", min=1, help="Number of demo orders"),
    seed: int = typer.Option(7, "--seed", "-s", help="Random seed for reproducible runs"),
):
    """Run a kitchen flow simulation and show the resulting orders."""
    store, events = run_simulation(orders, seed)

    console.print(render_orders("All Orders", store.all_orders()))
    console.print(render_orders("Active Orders", store.active_orders()))

    summary = Table(title="Summary")
    summary.add_column("Status", style="cyan")
    summary.add_column("Orders", style="green")
    for status in OrderStatus.ALL:
        summary.add_row(status, str(len(store.orders_with_status(status))))
    summary.add_row("events", str(len(events)))
    console.print(summary)


@app.command()
def board(
    orders: int = typer.Option(8, "--orders", "-o", min=1, help="Number of demo orders"),
    seed: int = typer.Option(7, "--seed", "-s", help="Random seed for reproducible runs"),
    limit: int = typer.Option(None, "--limit", "-l", min=1, help="Show at most this many orders"),
):
    """Show the customer-facing status board of a simulated store."""
    store, _ = run_simulation(orders, seed)
    board_orders = store.status_board(limit=limit)

    if not board_orders:
        console.print("[yellow]No orders on the board[/yellow]")
        return

    console.print(render_orders("Order Status", board_orders))


@app.command()
def version():
    """Show version information."""
    table = Table(title="Order Core Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("Order Core", "1.0.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
