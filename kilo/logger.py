"""
Logger module for the kilo text editor.

Provides a simple file-based logger for debugging and error tracking. The
screen belongs to the editor while raw mode is active, so nothing is ever
printed; everything worth keeping goes to the log file instead.
"""
import datetime

# Default log file path, replaced by configure() once the config is loaded
LOG_FILE_PATH = "kilo.log"

def configure(path: str) -> None:
    """Point the logger at a different file."""
    global LOG_FILE_PATH
    if path:
        LOG_FILE_PATH = path

def log(message: str) -> None:
    """Append a timestamped message to the log file."""
    try:
        with open(LOG_FILE_PATH, 'a', encoding='utf-8') as f:
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        # If logging fails (e.g., file not writable), ignore to avoid crashing the editor.
        pass

def log_error(op: str, err) -> None:
    """Log a failed operation together with the error text."""
    log(f"error in {op}: {err}")
