from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    router = current_app.extensions['drawrelay']
    return jsonify({'message': 'Drawing relay is running', 'rooms': len(router.registry)})
