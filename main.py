# main.py
import argparse
import json
import logging
import sys
from logging_setup import setup_logging
from database.db_connector import create_tables_if_not_exist
from database.recipe_storage import RecipeStorage
from recipe_import import import_from_url, import_from_ocr_text, InputValidationError
from scrapers import ScrapeError
from processors.classifier import PROTEIN_LABELS, METHOD_LABELS
from processors.durations import time_category, TIME_LABELS
from processors.nutrition import has_nutrition

logger = logging.getLogger(__name__)


def print_recipe(recipe):
    """Print a recipe as JSON for review, with display labels alongside; unknown nutrition is left out"""
    output = dict(recipe)
    if not has_nutrition(output.get('nutrition')):
        output.pop('nutrition', None)
    output['labels'] = {
        'protein_type': PROTEIN_LABELS.get(recipe.get('protein_type'), ''),
        'cooking_method': METHOD_LABELS.get(recipe.get('cooking_method'), ''),
        'time': TIME_LABELS.get(time_category(recipe.get('total_time_minutes')), '')
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))


def get_storage():
    return RecipeStorage()


def read_text_input(path):
    if path == '-':
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def save_if_requested(recipe, args):
    if not args.save:
        print_recipe(recipe)
        return
    stored = get_storage().save_recipe(recipe)
    print_recipe(stored)


def cmd_url(args):
    recipe = import_from_url(args.url)
    save_if_requested(recipe, args)


def cmd_ocr(args):
    recipe = import_from_ocr_text(read_text_input(args.file))
    save_if_requested(recipe, args)


def cmd_list(args):
    storage = get_storage()
    recipes = storage.get_recent_recipes(args.recent) if args.recent else storage.list_recipes()
    for recipe in recipes:
        print(f"{recipe['id']:>5}  {recipe['title']}  [{recipe['protein_type']}, {recipe['cooking_method']}]")
    logger.info(f"Listed {len(recipes)} recipes")


def cmd_show(args):
    recipe = get_storage().get_recipe(args.id)
    if recipe is None:
        logger.error(f"No recipe with ID {args.id}")
        return 1
    print_recipe(recipe)


def cmd_search(args):
    for recipe in get_storage().search_recipes(args.query):
        print(f"{recipe['id']:>5}  {recipe['title']}")


def parse_changes(args):
    """
    Collect the field changes for an edit

    Args:
        args: Parsed arguments with an optional JSON file of changes and
            repeated field=value assignments (assignments win)

    Returns:
        dict: Fields to overwrite

    Raises:
        InputValidationError: If the changes are missing or malformed
    """
    changes = {}

    if args.file:
        try:
            loaded = json.loads(read_text_input(args.file))
        except ValueError as e:
            raise InputValidationError(f"Invalid JSON in {args.file}: {str(e)}") from e
        if not isinstance(loaded, dict):
            raise InputValidationError(f"{args.file} must hold a JSON object of fields to change")
        changes.update(loaded)

    for assignment in args.set or []:
        field, sep, value = assignment.partition('=')
        field = field.strip()
        if not sep or not field:
            raise InputValidationError(f"Expected field=value, got '{assignment}'")
        # Numbers and lists may be given as JSON, anything else is text
        try:
            changes[field] = json.loads(value)
        except ValueError:
            changes[field] = value

    if not changes:
        raise InputValidationError('No changes given')
    return changes


def cmd_edit(args):
    changes = parse_changes(args)
    recipe = get_storage().update_recipe(args.id, changes)
    if recipe is None:
        logger.error(f"No recipe with ID {args.id}")
        return 1
    print_recipe(recipe)


def cmd_delete(args):
    if not get_storage().delete_recipe(args.id):
        logger.error(f"No recipe with ID {args.id}")
        return 1


def cmd_init_db(args):
    create_tables_if_not_exist()


def build_parser():
    parser = argparse.ArgumentParser(description='Import recipes from web pages or OCR text')
    parser.add_argument('--no-log-file', action='store_true', help='Log to stderr only')
    subparsers = parser.add_subparsers(dest='command', required=True)

    url_parser = subparsers.add_parser('url', help='Scrape a recipe from a web page')
    url_parser.add_argument('url', help='Recipe page URL')
    url_parser.add_argument('--save', action='store_true', help='Save the recipe instead of only printing it')
    url_parser.set_defaults(func=cmd_url)

    ocr_parser = subparsers.add_parser('ocr', help='Parse a recipe from OCR text')
    ocr_parser.add_argument('file', help="File with the OCR engine's text output, or - for stdin")
    ocr_parser.add_argument('--save', action='store_true', help='Save the recipe instead of only printing it')
    ocr_parser.set_defaults(func=cmd_ocr)

    list_parser = subparsers.add_parser('list', help='List saved recipes, newest first')
    list_parser.add_argument('--recent', type=int, help='Only show the N most recent recipes')
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser('show', help='Show a saved recipe')
    show_parser.add_argument('id', type=int)
    show_parser.set_defaults(func=cmd_show)

    search_parser = subparsers.add_parser('search', help='Search saved recipes')
    search_parser.add_argument('query')
    search_parser.set_defaults(func=cmd_search)

    edit_parser = subparsers.add_parser('edit', help='Change fields of a saved recipe')
    edit_parser.add_argument('id', type=int)
    edit_parser.add_argument('--set', action='append', metavar='FIELD=VALUE',
                             help='Field to overwrite; repeat for several fields')
    edit_parser.add_argument('--file', help='JSON object of fields to overwrite, or - for stdin')
    edit_parser.set_defaults(func=cmd_edit)

    delete_parser = subparsers.add_parser('delete', help='Delete a saved recipe')
    delete_parser.add_argument('id', type=int)
    delete_parser.set_defaults(func=cmd_delete)

    init_parser = subparsers.add_parser('init-db', help='Create the recipes table')
    init_parser.set_defaults(func=cmd_init_db)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.no_log_file:
        setup_logging(log_dir=None)
    else:
        setup_logging()

    try:
        return args.func(args) or 0
    except (InputValidationError, ScrapeError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
