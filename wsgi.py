# wsgi.py
import atexit

from durood_tracker import create_app, get_broadcaster

app = create_app()
atexit.register(get_broadcaster(app).close)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, threaded=True)
