#!/usr/bin/env python3
"""
Tests for the PostgreSQL recipe store against mock connections
"""

import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from database.db_connector import connection_settings, create_tables_if_not_exist, get_db_connection
from database.recipe_storage import RecipeStorage
from processors.recipe_processor import empty_recipe

CREATED = datetime(2024, 3, 1, 12, 0, 0)
UPDATED = datetime(2024, 3, 2, 8, 30, 0)


def make_connection():
    conn = MagicMock()
    cursor = conn.cursor.return_value.__enter__.return_value
    cursor.fetchone.return_value = None
    cursor.fetchall.return_value = []
    return conn, cursor


def make_row(recipe_id=1, **fields):
    data = empty_recipe()
    data.update(fields)
    return {'id': recipe_id, 'title': data['title'], 'data': data, 'created_at': CREATED, 'updated_at': UPDATED}


def storage_for(conn):
    return RecipeStorage(connection_factory=lambda: conn)


def test_save_recipe_inserts_normalized_payload():
    conn, cursor = make_connection()

    def inserted_row():
        title, data, created_at, updated_at = cursor.execute.call_args[0][1]
        return {'id': 7, 'title': title, 'data': json.loads(data), 'created_at': created_at, 'updated_at': updated_at}

    cursor.fetchone.side_effect = inserted_row

    draft = dict(empty_recipe(), id=99, title='Beef Tacos', ingredients=['1 lb beef', ''], created_at='yesterday')
    stored = storage_for(conn).save_recipe(draft)

    sql, params = cursor.execute.call_args[0]
    assert 'INSERT INTO recipes' in sql
    payload = json.loads(params[1])
    assert 'id' not in payload
    assert 'created_at' not in payload
    assert payload['ingredients'] == ['1 lb beef']
    assert payload['protein_type'] == 'none'

    assert stored['id'] == 7
    assert stored['title'] == 'Beef Tacos'
    assert isinstance(stored['created_at'], str)
    conn.commit.assert_called_once()
    conn.close.assert_called_once()


def test_get_recipe():
    conn, cursor = make_connection()
    cursor.fetchone.return_value = make_row(3, title='Pad Thai')

    recipe = storage_for(conn).get_recipe(3)

    assert recipe['id'] == 3
    assert recipe['title'] == 'Pad Thai'
    assert recipe['created_at'] == '2024-03-01T12:00:00'
    assert cursor.execute.call_args[0][1] == (3,)


def test_get_missing_recipe_returns_none():
    conn, cursor = make_connection()

    assert storage_for(conn).get_recipe(404) is None


def test_get_recipe_with_json_text_payload():
    conn, cursor = make_connection()
    row = make_row(5, title='Chili')
    row['data'] = json.dumps(row['data'])
    cursor.fetchone.return_value = row

    assert storage_for(conn).get_recipe(5)['title'] == 'Chili'


def test_list_and_recent_recipes():
    conn, cursor = make_connection()
    cursor.fetchall.return_value = [make_row(2, title='Newer'), make_row(1, title='Older')]
    storage = storage_for(conn)

    assert [r['title'] for r in storage.list_recipes()] == ['Newer', 'Older']
    assert 'ORDER BY created_at DESC' in cursor.execute.call_args[0][0]

    storage.get_recent_recipes(2)
    assert cursor.execute.call_args[0][1] == (2,)


def test_update_recipe_merges_changes():
    conn, cursor = make_connection()
    existing = make_row(4, title='Soup', ingredients=['1 onion'])

    def rows():
        yield existing
        title, data, updated_at, recipe_id = cursor.execute.call_args[0][1]
        yield {'id': recipe_id, 'title': title, 'data': json.loads(data), 'created_at': CREATED,
               'updated_at': updated_at}

    cursor.fetchone.side_effect = rows()

    updated = storage_for(conn).update_recipe(4, {'title': 'Onion Soup', 'servings': '2'})

    assert updated['title'] == 'Onion Soup'
    assert updated['servings'] == '2'
    assert updated['ingredients'] == ['1 onion']
    assert updated['created_at'] == '2024-03-01T12:00:00'
    assert 'UPDATE recipes' in cursor.execute.call_args[0][0]
    conn.commit.assert_called_once()


def test_update_missing_recipe_returns_none():
    conn, cursor = make_connection()

    assert storage_for(conn).update_recipe(8, {'title': 'Nope'}) is None
    assert cursor.execute.call_count == 1


def test_delete_recipe():
    conn, cursor = make_connection()
    storage = storage_for(conn)

    cursor.rowcount = 1
    assert storage.delete_recipe(1) is True

    cursor.rowcount = 0
    assert storage.delete_recipe(1) is False


def test_search_recipes_escapes_wildcards():
    conn, cursor = make_connection()
    storage = storage_for(conn)

    storage.search_recipes(' chicken ')
    sql, params = cursor.execute.call_args[0]
    assert 'ILIKE' in sql
    assert params == ('%chicken%',) * 3

    storage.search_recipes('100%_rye')
    assert cursor.execute.call_args[0][1][0] == '%100\\%\\_rye%'


def test_blank_search_lists_everything():
    conn, cursor = make_connection()

    storage_for(conn).search_recipes('  ')

    assert 'ILIKE' not in cursor.execute.call_args[0][0]


def test_errors_roll_back_and_propagate():
    conn, cursor = make_connection()
    cursor.execute.side_effect = RuntimeError('connection lost')

    with pytest.raises(RuntimeError, match='connection lost'):
        storage_for(conn).get_recipe(1)

    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    conn.close.assert_called_once()


def test_create_tables_if_not_exist():
    conn, cursor = make_connection()

    create_tables_if_not_exist(connection_factory=lambda: conn)

    assert 'CREATE TABLE IF NOT EXISTS recipes' in cursor.execute.call_args_list[0][0][0]
    conn.commit.assert_called_once()
    conn.close.assert_called_once()


@patch('database.db_connector.config')
def test_connection_settings_prefer_database_url(mock_config):
    mock_config.DATABASE_URL = 'postgresql://chef:secret@db:5432/recipes'
    mock_config.DB_CONNECT_TIMEOUT = 5

    assert connection_settings() == {'dsn': 'postgresql://chef:secret@db:5432/recipes', 'connect_timeout': 5}


@patch('database.db_connector.config')
def test_connection_settings_skip_unset_values(mock_config):
    mock_config.DATABASE_URL = None
    mock_config.DB_NAME = 'recipes'
    mock_config.DB_USER = 'chef'
    mock_config.DB_PASSWORD = None
    mock_config.DB_HOST = 'localhost'
    mock_config.DB_PORT = '5432'
    mock_config.DB_CONNECT_TIMEOUT = 10

    assert connection_settings() == {
        'dbname': 'recipes', 'user': 'chef', 'host': 'localhost', 'port': '5432', 'connect_timeout': 10
    }


@patch('database.db_connector.psycopg2.connect')
@patch('database.db_connector.connection_settings')
def test_connection_errors_propagate(mock_settings, mock_connect):
    mock_settings.return_value = {'dsn': 'postgresql://db/recipes', 'connect_timeout': 10}
    mock_connect.side_effect = psycopg2.OperationalError('could not connect to server')

    with pytest.raises(psycopg2.OperationalError):
        get_db_connection()

    mock_connect.assert_called_once_with(dsn='postgresql://db/recipes', connect_timeout=10)
