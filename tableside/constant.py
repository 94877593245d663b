"""Raw menu and modifier data. Wrapped into dataclasses by tableside.data."""

from __future__ import annotations

MODIFIER_GROUPS: dict[str, dict[str, object]] = {
    "spice_level": {
        "name": "Spice Level",
        "required": True,
        "multi_select": False,
        "options": [
            ("mild", "Mild", 0.0),
            ("medium", "Medium", 0.0),
            ("hot", "Hot", 0.0),
            ("extra_hot", "Extra Hot", 0.5),
        ],
    },
    "toppings": {
        "name": "Toppings",
        "required": False,
        "multi_select": True,
        "options": [
            ("cheese", "Cheese", 1.0),
            ("mushrooms", "Mushrooms", 1.5),
            ("peppers", "Peppers", 1.0),
            ("onions", "Onions", 0.75),
        ],
    },
    "size": {
        "name": "Size",
        "required": True,
        "multi_select": False,
        "options": [
            ("small", "Small", -2.0),
            ("regular", "Regular", 0.0),
            ("large", "Large", 3.0),
        ],
    },
}

# Category slug -> display name, in menu order.
MENU_CATEGORIES: dict[str, str] = {
    "pizza": "Pizza",
    "pasta": "Pasta",
    "salad": "Salad",
    "dessert": "Dessert",
    "drinks": "Drinks",
}

MENU_ITEMS: dict[str, dict[str, object]] = {
    "margherita_pizza": {
        "name": "Margherita Pizza",
        "description": "Classic pizza with tomato sauce, mozzarella, and basil",
        "price": 12.99,
        "category": "pizza",
        "available": True,
        "preparation_minutes": 15,
        "modifiers": ["toppings", "size"],
    },
    "pepperoni_pizza": {
        "name": "Pepperoni Pizza",
        "description": "Pizza with tomato sauce, mozzarella, and pepperoni",
        "price": 14.99,
        "category": "pizza",
        "available": True,
        "preparation_minutes": 15,
        "modifiers": ["toppings", "size"],
    },
    "veggie_pizza": {
        "name": "Veggie Pizza",
        "description": "Pizza with tomato sauce, mozzarella, and assorted vegetables",
        "price": 13.99,
        "category": "pizza",
        "available": False,
        "preparation_minutes": 15,
        "modifiers": ["toppings", "size"],
    },
    "caesar_salad": {
        "name": "Caesar Salad",
        "description": "Romaine lettuce, croutons, parmesan cheese with Caesar dressing",
        "price": 8.99,
        "category": "salad",
        "available": True,
        "preparation_minutes": 5,
        "modifiers": [],
    },
    "greek_salad": {
        "name": "Greek Salad",
        "description": "Mixed greens, tomatoes, cucumbers, olives, feta cheese with vinaigrette",
        "price": 9.99,
        "category": "salad",
        "available": True,
        "preparation_minutes": 5,
        "modifiers": [],
    },
    "spaghetti_bolognese": {
        "name": "Spaghetti Bolognese",
        "description": "Spaghetti with hearty meat sauce",
        "price": 15.99,
        "category": "pasta",
        "available": True,
        "preparation_minutes": 20,
        "modifiers": ["spice_level"],
    },
    "fettuccine_alfredo": {
        "name": "Fettuccine Alfredo",
        "description": "Fettuccine pasta with creamy parmesan sauce",
        "price": 14.99,
        "category": "pasta",
        "available": True,
        "preparation_minutes": 18,
        "modifiers": [],
    },
    "tiramisu": {
        "name": "Tiramisu",
        "description": "Classic Italian dessert with coffee-soaked ladyfingers and mascarpone cream",
        "price": 7.99,
        "category": "dessert",
        "available": True,
        "preparation_minutes": 0,
        "modifiers": [],
    },
    "cheesecake": {
        "name": "Cheesecake",
        "description": "Creamy cheesecake with berry compote",
        "price": 6.99,
        "category": "dessert",
        "available": True,
        "preparation_minutes": 0,
        "modifiers": [],
    },
    "coca_cola": {
        "name": "Coca-Cola",
        "description": "Classic cola beverage",
        "price": 2.99,
        "category": "drinks",
        "available": True,
        "preparation_minutes": 0,
        "modifiers": [],
    },
    "iced_tea": {
        "name": "Iced Tea",
        "description": "Refreshing iced tea with lemon",
        "price": 2.99,
        "category": "drinks",
        "available": True,
        "preparation_minutes": 0,
        "modifiers": [],
    },
    "fresh_lemonade": {
        "name": "Fresh Lemonade",
        "description": "Housemade lemonade with fresh lemons",
        "price": 3.99,
        "category": "drinks",
        "available": True,
        "preparation_minutes": 3,
        "modifiers": [],
    },
}

# Customer-facing messages shown when an order reaches a status.
STATUS_MESSAGES: dict[str, str] = {
    "preparing": "The kitchen is now preparing your food!",
    "ready": "Your food is ready! It will be served shortly.",
    "served": "Your food has been served. Enjoy your meal!",
}

TIMER_MESSAGES: dict[str, str] = {
    "pending": "Order received, preparing soon...",
    "preparing": "Your food is being prepared...",
    "overdue": "Your food should be ready soon!",
    "ready": "Your food is ready!",
    "served": "Enjoy your meal!",
    "completed": "Thank you for dining with us!",
    "cancelled": "Order was cancelled",
}
