from flask import Flask
from flask_wtf.csrf import CSRFProtect
from dotenv import load_dotenv
import os
import logging

load_dotenv()

csrf = CSRFProtect()

def create_app():
    # Validate required environment variables
    required_vars = ['SECRET_KEY']
    for var in required_vars:
        if not os.getenv(var):
            raise ValueError(f"Required environment variable {var} is not set")
    
    app = Flask(__name__)
    app.config.from_object('config')

    # Validate numeric game settings
    from app.projects.tic_tac_toe.core.session_store import (
        configured_board_size, configured_max_sessions)
    app.config['TIC_TAC_TOE_BOARD_SIZE'] = configured_board_size(app.config)
    app.config['TIC_TAC_TOE_MAX_SESSIONS'] = configured_max_sessions(app.config)
    
    # Configure logging
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    
    # Initialize extensions
    csrf.init_app(app)
    
    # Register blueprints
    from app.routes.main import main_bp
    from app.projects.tic_tac_toe.routes import tic_tac_toe_bp
    
    app.register_blueprint(main_bp)
    app.register_blueprint(tic_tac_toe_bp, url_prefix='/tic-tac-toe')
    
    # Register CLI commands
    from app.projects.tic_tac_toe import commands as tic_tac_toe_commands
    tic_tac_toe_commands.init_app(app)
    
    return app
