from .app import create_app

# Production: debug=False; threaded=True is fine for this CPU-light profile.
create_app().run(debug=False, threaded=True)
