import sqlalchemy as sa
import sqlalchemy.orm as so
from dotenv import load_dotenv
from bulletin import create_app, db
from bulletin.models import User, EventType, Event, EventSubmission
import os

load_dotenv('.flaskenv')
load_dotenv()

app = create_app(os.getenv('FLASK_CONFIG') or 'development')

@app.shell_context_processor
def make_shell_context():
    return {
        'sa': sa,
        'so': so,
        'db': db,
        'User': User,
        'EventType': EventType,
        'Event': Event,
        'EventSubmission': EventSubmission,
    }

if __name__ == '__main__':
    app.run(debug=True)
