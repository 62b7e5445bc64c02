"""Domain model: goods, inventory, markets and game state."""
