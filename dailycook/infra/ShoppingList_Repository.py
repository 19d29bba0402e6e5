"""Persisted shopping lists (file persistence)."""
from uuid import uuid4

from dailycook.domain.ShoppingList import ShoppingList
from dailycook.infra.json_store import JsonStore
from dailycook.infra.paths import SHOPPING_LISTS_FILE


class ShoppingListRepository:
    def __init__(self, path=SHOPPING_LISTS_FILE):
        self._store = JsonStore(path)

    def create(self, shopping_list: ShoppingList) -> ShoppingList:
        shopping_list.id = shopping_list.id or str(uuid4())
        with self._store.transaction() as data:
            data.append(shopping_list.to_dict())
        return shopping_list

    def list_for_user(self, user_id: str):
        return [entry for entry in self._store.read() if entry.get("user_id") == user_id]
