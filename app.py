import logging

from flask import Flask, current_app, jsonify, request
from flask_migrate import Migrate

from config import get_config
from constants import MAX_INGREDIENTS_PER_RECIPE, MAX_LENGTHS, MAX_UNDO_RECORDS
from models import db, InventoryItem, Recipe
from services import (
    DeductionError,
    DeductionRecord,
    InsufficientStockError,
    InvalidQuantityError,
    InventoryConflictError,
    InventoryStore,
    MissingIngredientError,
    NotOwnerError,
    RecipeNotFoundError,
    StorageError,
    confirm_recipe_use,
    cook_recipe,
    float_to_fraction,
    policy_from_config,
    rank_recipes,
    score_recipe,
    undo_cook,
)

migrate = Migrate()


class BadRequest(Exception):
    """Raised for malformed request bodies."""

    def __init__(self, message, status=400):
        super().__init__(message)
        self.message = message
        self.status = status


def create_app(env=None, overrides=None):
    app = Flask(__name__)
    app.config.from_object(get_config(env))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    db.init_app(app)
    migrate.init_app(app, db)

    app.extensions['inventory_store'] = InventoryStore(
        db, InventoryItem, Recipe,
        isolation_level=app.config['INVENTORY_ISOLATION_LEVEL'],
    )
    app.extensions['match_policy'] = policy_from_config(app.config)

    register_error_handlers(app)
    register_routes(app)

    @app.cli.command('init-db')
    def init_db_command():
        """Create the database tables."""
        init_db(app)
        print('Database initialized.')

    return app


def init_db(app):
    with app.app_context():
        db.create_all()


def get_store():
    return current_app.extensions['inventory_store']


def get_policy():
    return current_app.extensions['match_policy']


# ============================================
# REQUEST HELPERS
# ============================================

def current_user_id():
    """Caller identity, set by the authentication layer in front of this app."""
    user_id = (request.headers.get('X-User-Id') or '').strip()
    if not user_id:
        raise BadRequest('Missing X-User-Id header', status=401)
    if len(user_id) > MAX_LENGTHS['user_id']:
        raise BadRequest('Invalid user id')
    return user_id


def request_json():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest('Expected a JSON object')
    return data


def validate_ingredients(entries):
    """Check a recipe ingredient list: strings or {name, qty?, unit?} objects."""
    if not isinstance(entries, list):
        raise BadRequest('ingredients must be a list')
    if len(entries) > MAX_INGREDIENTS_PER_RECIPE:
        raise BadRequest(f'At most {MAX_INGREDIENTS_PER_RECIPE} ingredients allowed')
    for entry in entries:
        if isinstance(entry, str):
            if len(entry) > MAX_LENGTHS['ingredient_text']:
                raise BadRequest('Ingredient text too long')
        elif isinstance(entry, dict):
            name = entry.get('name')
            if not isinstance(name, str) or not name.strip():
                raise BadRequest('Ingredient objects need a name')
            if len(name) > MAX_LENGTHS['ingredient_name']:
                raise BadRequest('Ingredient name too long')
            unit = entry.get('unit')
            if unit is not None and (not isinstance(unit, str) or len(unit) > MAX_LENGTHS['unit']):
                raise BadRequest('Invalid unit')
        else:
            raise BadRequest('Ingredients must be strings or objects')
    return entries


def match_result_to_dict(result):
    return {
        'full_matches': result.full_matches,
        'partial_matches': [
            {
                'ingredient': pm.ingredient,
                'percentage': pm.percentage,
                'inventory_item': pm.inventory_item.to_dict(),
            }
            for pm in result.partial_matches
        ],
        'missing_ingredients': result.missing_ingredients,
        'match_score': result.match_score,
        'total_ingredients': result.total_ingredients,
    }


# ============================================
# ERROR HANDLERS
# ============================================

def register_error_handlers(app):

    @app.errorhandler(BadRequest)
    def handle_bad_request(e):
        return jsonify({'error': e.message}), e.status

    @app.errorhandler(DeductionError)
    def handle_deduction_error(e):
        if isinstance(e, NotOwnerError):
            status = 403
        elif isinstance(e, RecipeNotFoundError):
            status = 404
        else:
            status = 409
        body = {'error': str(e), 'retryable': False}
        if isinstance(e, (MissingIngredientError, InsufficientStockError, InvalidQuantityError)):
            body['ingredient'] = e.ingredient
        return jsonify(body), status

    @app.errorhandler(StorageError)
    def handle_storage_error(e):
        if isinstance(e, InventoryConflictError):
            return jsonify({'error': str(e), 'retryable': False}), 409
        return jsonify({'error': 'Failed to update inventory, please try again', 'retryable': True}), 503


# ============================================
# ROUTES
# ============================================

def register_routes(app):

    @app.route('/api/inventory')
    def inventory_list():
        user_id = current_user_id()
        items = []
        for item in get_store().list_items(user_id):
            data = item.to_dict()
            data['display'] = f"{float_to_fraction(item.quantity)} {item.unit or ''}".strip()
            items.append(data)
        return jsonify({'items': items})

    @app.route('/api/match', methods=['POST'])
    def recipe_match():
        user_id = current_user_id()
        ingredients = validate_ingredients(request_json().get('ingredients'))
        inventory = get_store().list_items(user_id)
        result = score_recipe(ingredients, inventory, policy=get_policy())
        return jsonify(match_result_to_dict(result))

    @app.route('/api/rank', methods=['POST'])
    def recipe_rank():
        user_id = current_user_id()
        recipes = request_json().get('recipes')
        if not isinstance(recipes, list) or any(not isinstance(r, dict) for r in recipes):
            raise BadRequest('recipes must be a list of objects')
        pairs = [(r.get('id'), validate_ingredients(r.get('ingredients'))) for r in recipes]
        inventory = get_store().list_items(user_id)
        ranked = rank_recipes(pairs, inventory, policy=get_policy())
        return jsonify({'recipes': [
            dict(id=key, **match_result_to_dict(result)) for key, result in ranked
        ]})

    @app.route('/api/cook', methods=['POST'])
    def cook():
        user_id = current_user_id()
        ingredients = validate_ingredients(request_json().get('ingredients'))
        result = cook_recipe(user_id, ingredients, get_store(), policy=get_policy())
        if result.deducted_count == 0:
            message = 'No matching or convertible ingredients found in your inventory.'
        else:
            message = f'Ingredients updated for {result.deducted_count} items. You can undo this action.'
        return jsonify({
            'deducted_count': result.deducted_count,
            'deductions': [d.to_dict() for d in result.deductions],
            'message': message,
        })

    @app.route('/api/undo', methods=['POST'])
    def undo():
        user_id = current_user_id()
        entries = request_json().get('deductions') or []
        if not isinstance(entries, list) or len(entries) > MAX_UNDO_RECORDS:
            raise BadRequest('deductions must be a list')
        try:
            records = [DeductionRecord.from_dict(entry) for entry in entries]
        except (KeyError, TypeError, ValueError):
            raise BadRequest('Invalid deduction record')
        result = undo_cook(user_id, records, get_store())
        if result.nothing_to_undo:
            return jsonify({'restored_count': 0, 'message': 'Nothing to undo'})
        return jsonify({'restored_count': result.restored_count, 'message': 'Inventory quantities restored'})

    @app.route('/api/recipes/<int:recipe_id>/confirm-use', methods=['POST'])
    def confirm_use(recipe_id):
        user_id = current_user_id()
        deductions = confirm_recipe_use(recipe_id, user_id, get_store())
        return jsonify({'ok': True, 'deductions': [d.to_dict() for d in deductions]})


if __name__ == '__main__':
    application = create_app()
    init_db(application)
    application.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
