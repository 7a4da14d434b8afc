# catalog_sdk/cli.py
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from catalog.config import get_settings

from .client import CatalogClient, CatalogClientError

console = Console()
c: Optional[CatalogClient] = None

# Global state for status messages and autocomplete caches
status_message = "Ready"
category_cache: List[Dict[str, Any]] = []
product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_categories(categories: List[Dict[str, Any]]):
    if not categories:
        console.print("[italic yellow]No categories found[/italic yellow]")
        return

    table = Table(title="🏷️ Categories", box=box.ROUNDED, header_style="bold cyan", title_style="bold magenta")
    table.add_column("ID", style="dim", width=8)
    table.add_column("Name", style="bold", width=30)
    for cat in categories:
        table.add_row(str(cat.get("id")), cat.get("name", "N/A"))
    console.print(table)


def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    names = {cat.get("id"): cat.get("name") for cat in category_cache}
    table = Table(
        title="📦 Products Catalog",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=8)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Description", width=30)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", justify="right", width=8)
    table.add_column("Category", width=15)

    for p in products:
        stock = p.get("stockQuantity", 0)
        stock_style = "red" if stock == 0 else "green"
        cat_id = p.get("categoryId")
        # a product may point at a category that was deleted afterwards
        cat_label = names.get(cat_id, f"[red]#{cat_id} (missing)[/red]")
        table.add_row(
            str(p.get("id")),
            p.get("name", "N/A"),
            p.get("description", ""),
            f"${p.get('price', 0):.2f}",
            f"[{stock_style}]{stock}[/{stock_style}]",
            cat_label,
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None when the service rejected the call or was unreachable.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
    except CatalogClientError as e:
        status_message = f"Error: {e.detail} (HTTP {e.status_code})"
        console.print(show_status(status_message, False))
        return None
    except OSError as e:
        # requests' ConnectionError and Timeout derive from OSError
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return None

    if success_msg:
        status_message = success_msg
        console.print(show_status(success_msg, True))
    return result


def refresh_caches():
    global category_cache, product_cache
    category_cache = try_api(c.list_categories) or []
    product_cache = try_api(c.list_products) or []


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_category_completer():
    return WordCompleter([str(cat.get("id")) for cat in category_cache], ignore_case=True)


def get_product_completer():
    return WordCompleter([str(p.get("id")) for p in product_cache], ignore_case=True)


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Catalog SDK",
        "[bold blue]Catalog CLI with Autocomplete[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_int(message: str, completer=None) -> Optional[int]:
    raw = prompt_with_autocomplete(message, completer=completer).strip()
    try:
        return int(raw)
    except ValueError:
        console.print("[red]Please enter a whole number.[/red]")
        return None


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_product_fields():
    name = prompt_with_autocomplete("Enter product name")
    description = prompt_with_autocomplete("Enter description")
    price = ask_float("💰 Price", default=10.0)
    stock = IntPrompt.ask("📦 Stock quantity", default=0)
    category_id = ask_int("🏷️ Category ID", completer=get_category_completer())
    return name, description, price, stock, category_id


# ---------------------------
# Main menu
# ---------------------------
MENU_OPTIONS = [
    ("1", "🏷️ List categories", "7", "📦 List products"),
    ("2", "ℹ️ Get category", "8", "ℹ️ Get product"),
    ("3", "➕ Create category", "9", "➕ Create product"),
    ("4", "✏️ Rename category", "10", "✏️ Replace product"),
    ("5", "🗑️ Delete category", "11", "🗑️ Delete product"),
    ("6", "🔄 Reset catalog", "12", "📈 Add stock"),
    ("", "", "13", "📉 Reduce stock"),
    ("", "", "q", "👋 Quit"),
]


def handle_choice(choice: str):
    global category_cache, product_cache

    if choice == "1":
        categories = try_api(c.list_categories, success_msg="Categories loaded")
        if categories is not None:
            category_cache = categories
            show_categories(categories)

    elif choice == "2":
        cid = ask_int("Enter category ID", completer=get_category_completer())
        if cid is not None:
            resp = try_api(c.get_category, cid)
            if resp:
                show_categories([resp])

    elif choice == "3":
        cid = ask_int("Enter new category ID")
        if cid is not None:
            name = prompt_with_autocomplete("Enter category name")
            if try_api(c.create_category, cid, name, success_msg=f"Category '{name}' created"):
                refresh_caches()

    elif choice == "4":
        cid = ask_int("Enter category ID", completer=get_category_completer())
        if cid is not None:
            name = prompt_with_autocomplete("Enter new name")
            if try_api(c.update_category, cid, name, success_msg=f"Category {cid} renamed"):
                refresh_caches()

    elif choice == "5":
        cid = ask_int("Enter category ID", completer=get_category_completer())
        if cid is not None and Confirm.ask(f"Delete category {cid}? Products keep pointing at it."):
            try_api(c.delete_category, cid, success_msg=f"Category {cid} deleted")
            refresh_caches()

    elif choice == "6":
        if Confirm.ask("[red]This will clear all data. Continue?[/red]"):
            try_api(c.reset, success_msg="Catalog reset")
            refresh_caches()

    elif choice == "7":
        products = try_api(c.list_products, success_msg="Products loaded")
        if products is not None:
            product_cache = products
            show_products(products)

    elif choice == "8":
        pid = ask_int("Enter product ID", completer=get_product_completer())
        if pid is not None:
            resp = try_api(c.get_product, pid)
            if resp:
                show_products([resp])

    elif choice in ("9", "10"):
        completer = get_product_completer() if choice == "10" else None
        pid = ask_int("Enter product ID", completer=completer)
        if pid is None:
            return
        name, description, price, stock, category_id = ask_product_fields()
        if category_id is None:
            return
        fn = c.create_product if choice == "9" else c.update_product
        resp = try_api(fn, pid, name, description, price, stock, category_id,
                       success_msg=f"Product {pid} saved")
        if resp:
            refresh_caches()
            show_products([resp])

    elif choice == "11":
        pid = ask_int("Enter product ID", completer=get_product_completer())
        if pid is not None and Confirm.ask(f"Delete product {pid}?"):
            try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
            refresh_caches()

    elif choice in ("12", "13"):
        pid = ask_int("Enter product ID", completer=get_product_completer())
        if pid is None:
            return
        qty = IntPrompt.ask("Quantity", default=1)
        if choice == "12":
            resp = try_api(c.add_stock, pid, qty, success_msg=f"Added {qty} to product {pid}")
        else:
            resp = try_api(c.reduce_stock, pid, qty, success_msg=f"Removed {qty} from product {pid}")
        if resp:
            show_products([resp])

    elif choice.lower() in ("q", "quit", "exit"):
        if Confirm.ask("Are you sure you want to quit?"):
            console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
            sys.exit(0)


def menu():
    console.clear()
    console.print(create_header())
    refresh_caches()

    while True:
        if status_message:
            console.print(show_status(status_message, not status_message.startswith("Error")))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        for row in MENU_OPTIONS:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 14)] + ["q", "quit", "exit"])
        ).strip()
        handle_choice(choice)

        console.print()
        console.rule(style="dim")


def main(base_url: Optional[str] = None):
    global c
    c = CatalogClient(base_url=base_url or get_settings().base_url)
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
