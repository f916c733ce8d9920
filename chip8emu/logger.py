import logging

logger = logging.getLogger("chip8emu")

#make it true if you want the per-instruction logs (F1 toggles it at runtime)
logs_on = False


def set_logs(on):
    global logs_on
    logs_on = bool(on)
    logger.setLevel(logging.DEBUG if logs_on else logging.NOTSET)


def toggle_logs():
    set_logs(not logs_on)
    logger.info("logs_on: %s", logs_on)
    return logs_on


def log(*args):
    if logs_on:
        logger.debug(" ".join(str(a) for a in args))


def setup_logging(debug=False):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    set_logs(debug)
