"""
Quick Actions - Fixed catalog of ready-made queries for the editor.

Selecting an action only loads its text into the editor; nothing runs until
the user executes it.
"""
from typing import List, Optional

from querybench.domain.base import CamelCaseModel


class QuickAction(CamelCaseModel):
    id: str
    name: str
    description: str
    query_text: str


QUICK_ACTIONS = (
    QuickAction(
        id="show-tables",
        name="Show Tables",
        description="List all tables in the database",
        query_text="SHOW TABLES;",
    ),
    QuickAction(
        id="database-info",
        name="Database Info",
        description="Show database information",
        query_text="SELECT DATABASE(), VERSION(), USER();",
    ),
    QuickAction(
        id="users-table",
        name="Users Table",
        description="Show recent users",
        query_text="SELECT * FROM users ORDER BY created_at DESC LIMIT 10;",
    ),
    QuickAction(
        id="orders-summary",
        name="Orders Summary",
        description="Today's orders summary",
        query_text=(
            "SELECT COUNT(*) as total_orders, SUM(amount) as total_amount "
            "FROM orders WHERE created_at >= CURDATE();"
        ),
    ),
    QuickAction(
        id="top-products",
        name="Top Products",
        description="Most ordered products",
        query_text=(
            "SELECT p.name, COUNT(oi.id) as order_count FROM products p "
            "JOIN order_items oi ON p.id = oi.product_id "
            "GROUP BY p.id ORDER BY order_count DESC LIMIT 5;"
        ),
    ),
    QuickAction(
        id="describe-users",
        name="Describe Users",
        description="Show users table structure",
        query_text="DESCRIBE users;",
    ),
)


def list_quick_actions() -> List[QuickAction]:
    return list(QUICK_ACTIONS)


def get_quick_action(action_id: str) -> Optional[QuickAction]:
    for action in QUICK_ACTIONS:
        if action.id == action_id:
            return action
    return None
