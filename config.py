import logging
import os
from dotenv import load_dotenv

load_dotenv()

DB_PATH = os.getenv(
    'FLASHLEARN_DB_PATH',
    os.path.join(os.path.dirname(os.path.abspath(__file__)), 'flashlearn.db')
)
STORAGE_PREFIX = os.getenv('FLASHLEARN_STORAGE_PREFIX', 'flashlearn')
AUTOSAVE_INTERVAL = float(os.getenv('FLASHLEARN_AUTOSAVE_INTERVAL', '30'))

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
