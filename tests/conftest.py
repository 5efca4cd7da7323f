import os
import tempfile

# Point the data directory (logs, settings.json) at a throwaway folder before anything imports mc.
os.environ["METROCHRONO_HOME"] = tempfile.mkdtemp(prefix="metrochrono-tests-")
