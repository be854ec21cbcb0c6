# database/recipe_storage.py
import json
import logging
from contextlib import contextmanager
from datetime import datetime
from psycopg2.extras import RealDictCursor
from database.db_connector import get_db_connection
from processors.recipe_processor import RecipeProcessor

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = "id, title, data, created_at, updated_at"

# Keys the store owns; they are never written into the JSONB payload
STORE_KEYS = ('id', 'created_at', 'updated_at')


def _escape_like(query):
    return query.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def _timestamp(value):
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class RecipeStorage:
    """Keep reviewed recipes in PostgreSQL, one JSONB document per recipe"""

    def __init__(self, connection_factory=get_db_connection):
        self.connection_factory = connection_factory
        self.processor = RecipeProcessor()

    @contextmanager
    def _cursor(self):
        """Cursor on a fresh connection: commit on success, roll back and re-raise on error"""
        conn = self.connection_factory()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                yield cursor
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Database error: {str(e)}")
            raise
        finally:
            conn.close()

    def _to_payload(self, recipe):
        fields = {key: value for key, value in recipe.items() if key not in STORE_KEYS}
        return self.processor.process_recipe(fields)

    def _to_recipe(self, row):
        if not row:
            return None
        data = row['data']
        if isinstance(data, str):
            data = json.loads(data)
        recipe = dict(data)
        recipe.update({
            'id': row['id'],
            'created_at': _timestamp(row['created_at']),
            'updated_at': _timestamp(row['updated_at'])
        })
        return recipe

    def save_recipe(self, recipe):
        """
        Save a reviewed recipe

        Args:
            recipe (dict): Recipe fields, typically an edited extraction draft

        Returns:
            dict: The stored recipe with its id and timestamps
        """
        payload = self._to_payload(recipe)
        now = datetime.now()

        with self._cursor() as cursor:
            cursor.execute(f"""
                INSERT INTO recipes (title, data, created_at, updated_at)
                VALUES (%s, %s, %s, %s)
                RETURNING {RECIPE_COLUMNS}
            """, (payload['title'][:255], json.dumps(payload), now, now))
            stored = self._to_recipe(cursor.fetchone())

        logger.info(f"Saved recipe '{stored['title']}' with ID {stored['id']}")
        return stored

    def get_recipe(self, recipe_id):
        with self._cursor() as cursor:
            cursor.execute(f"SELECT {RECIPE_COLUMNS} FROM recipes WHERE id = %s", (recipe_id,))
            return self._to_recipe(cursor.fetchone())

    def list_recipes(self):
        """All recipes, newest first"""
        with self._cursor() as cursor:
            cursor.execute(f"SELECT {RECIPE_COLUMNS} FROM recipes ORDER BY created_at DESC, id DESC")
            return [self._to_recipe(row) for row in cursor.fetchall()]

    def get_recent_recipes(self, count=4):
        with self._cursor() as cursor:
            cursor.execute(f"""
                SELECT {RECIPE_COLUMNS} FROM recipes
                ORDER BY created_at DESC, id DESC
                LIMIT %s
            """, (count,))
            return [self._to_recipe(row) for row in cursor.fetchall()]

    def update_recipe(self, recipe_id, changes):
        """
        Merge changed fields into a stored recipe

        Args:
            recipe_id (int): Recipe ID
            changes (dict): Fields to overwrite

        Returns:
            dict: The updated recipe, or None if no recipe has that ID
        """
        with self._cursor() as cursor:
            cursor.execute(f"SELECT {RECIPE_COLUMNS} FROM recipes WHERE id = %s FOR UPDATE", (recipe_id,))
            existing = self._to_recipe(cursor.fetchone())
            if existing is None:
                logger.warning(f"No recipe with ID {recipe_id} to update")
                return None

            existing.update(changes)
            payload = self._to_payload(existing)

            cursor.execute(f"""
                UPDATE recipes
                SET title = %s, data = %s, updated_at = %s
                WHERE id = %s
                RETURNING {RECIPE_COLUMNS}
            """, (payload['title'][:255], json.dumps(payload), datetime.now(), recipe_id))
            updated = self._to_recipe(cursor.fetchone())

        logger.info(f"Updated recipe {recipe_id}")
        return updated

    def delete_recipe(self, recipe_id):
        """Delete a recipe; True if a recipe was removed"""
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM recipes WHERE id = %s", (recipe_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted recipe {recipe_id}")
        return deleted

    def search_recipes(self, query):
        """
        Find recipes whose title, description or ingredients contain the query

        Args:
            query (str): Case-insensitive search text; blank returns every recipe

        Returns:
            list: Matching recipes, newest first
        """
        if not query or not query.strip():
            return self.list_recipes()

        pattern = f"%{_escape_like(query.strip())}%"
        with self._cursor() as cursor:
            cursor.execute(f"""
                SELECT {RECIPE_COLUMNS} FROM recipes
                WHERE title ILIKE %s
                   OR data->>'description' ILIKE %s
                   OR (data->'ingredients')::text ILIKE %s
                ORDER BY created_at DESC, id DESC
            """, (pattern, pattern, pattern))
            return [self._to_recipe(row) for row in cursor.fetchall()]
