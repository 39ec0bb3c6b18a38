import os
import sys

# The Django project (mall + apps) lives under backend/; make it importable
# when pytest runs from the repository root.
BACKEND_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "backend")
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)
