"""
Main entry point and editor context for the kilo text editor.
"""
import signal
import sys
import time

from kilo import buffer, config, logger, terminal, viewport
from kilo.ui import keys, screen
from kilo.ui import input as ui_input

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"

class EditorContext:
    """
    Holds the state of one editing session: the terminal, the buffer being
    edited, the viewport onto it and the message bar text. Every operation
    gets this object instead of reaching for globals.
    """
    def __init__(self, term, settings=None, size=None):
        self.terminal = term
        self.config = settings or config.Config()
        self.decoder = keys.KeyDecoder(term.read_byte)

        # The status and message bars take the two bottom lines; a terminal
        # too short for both drops the message bar, then the status bar
        rows, cols = size or term.get_window_size()
        self.height, self.width = rows, cols
        self.bar_lines = min(2, max(rows - 1, 0))
        self.viewport = viewport.Viewport(max(rows - self.bar_lines, 1), max(cols, 1))

        self.buffer = buffer.Buffer(tab_stop=self.config.tab_stop)

        # Message bar text and when it was set
        self.status_message = ""
        self.status_time = 0.0

        # Remaining Ctrl-Q presses before quitting a modified buffer
        self.quit_times = self.config.quit_times

        # Running flag
        self.exit_flag = False

    def set_status_message(self, msg: str):
        self.status_message = msg
        self.status_time = time.time()

    def read_key(self) -> int:
        return self.decoder.read_key()

    def open_file(self, filename: str):
        """Load `filename`; a missing file starts an empty buffer with that name."""
        try:
            self.buffer.open(filename)
        except FileNotFoundError:
            self.buffer.filename = filename
            logger.log(f"new file: {filename}")
        except OSError as e:
            self.buffer.filename = filename
            self.set_status_message(f"error opening file: {e.strerror or e}")
            logger.log_error(f"opening {filename}", e)
        else:
            logger.log(f"opened {filename} ({len(self.buffer.rows)} lines)")

    def graceful_exit(self):
        """Stop the main loop after the current key."""
        logger.log("Editor exited.")
        self.exit_flag = True

def _terminate(signum, frame):
    # Unwind through the raw-mode scope so the terminal is restored
    raise SystemExit(1)

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = config.load_config()
    logger.configure(settings.log_file)

    term = terminal.Terminal()
    signal.signal(signal.SIGTERM, _terminate)
    signal.signal(signal.SIGHUP, _terminate)

    try:
        with term.raw_mode():
            context = EditorContext(term, settings)
            logger.log(f"Editor started ({context.height}x{context.width}).")
            if argv:
                context.open_file(argv[0])
            context.set_status_message(HELP_MESSAGE)

            # Main loop
            while not context.exit_flag:
                screen.refresh_screen(context)
                key = context.read_key()
                ui_input.process_keypress(context, key)
            screen.clear_screen(term)
    except terminal.TerminalError as e:
        die(term, e.op, e.strerror)
        return 1
    except OSError as e:
        die(term, "write", e.strerror or str(e))
        return 1
    except SystemExit:
        # SIGTERM/SIGHUP: raw mode is already restored, leave a clean screen
        try:
            screen.clear_screen(term)
        except OSError:
            pass
        logger.log("Editor terminated by signal.")
        raise
    return 0

def die(term, op: str, strerror: str):
    """Clear the screen and report a fatal terminal failure."""
    try:
        screen.clear_screen(term)
    except OSError:
        pass
    logger.log_error(op, strerror)
    sys.stderr.write(f"{op}: {strerror}\n")

def run():
    """Console-script entry point."""
    sys.exit(main())

if __name__ == "__main__":
    run()
