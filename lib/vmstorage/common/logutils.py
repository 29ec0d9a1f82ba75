# SPDX-FileCopyrightText: Red Hat, Inc.
# SPDX-License-Identifier: GPL-2.0-or-later

import datetime
import logging

from dateutil import tz

from vmstorage.common.config import config


class SimpleLogAdapter(logging.LoggerAdapter):
    # Because of how python implements the fact that warning
    # and warn are the same. I need to reimplement it here. :(
    warn = logging.LoggerAdapter.warning

    def __init__(self, logger, context):
        """
        Initialize an adapter with a logger and a dict-like object which
        provides contextual information. The contextual information is
        prepended to each log message.

        This adapter::

            self.log = SimpleLogAdapter(self.log, {"vm": "xxxyyy"})
            self.log.debug("Message")

        Would produce this message::

            "(vm='xxxyyy') Message"
        """
        super().__init__(logger, context)
        items = ", ".join(
            "%s='%s'" % (k, v) for k, v in context.items())
        self.prefix = "(%s) " % items

    def process(self, msg, kwargs):
        return self.prefix + msg, kwargs


class TimezoneFormatter(logging.Formatter):
    def converter(self, timestamp):
        return datetime.datetime.fromtimestamp(timestamp,
                                               tz.tzlocal())

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        if datefmt:
            s = ct.strftime(datefmt)
        else:
            s = "%s,%03d%s" % (
                ct.strftime('%Y-%m-%d %H:%M:%S'),
                record.msecs,
                ct.strftime('%z')
            )
        return s


def set_level(level_name, name=''):
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, type(logging.DEBUG)):
        raise ValueError("unknown log level: %r" % level_name)

    log_name = None if not name else name
    # getLogger() default argument is None, not ''
    logger = logging.getLogger(log_name)
    logging.info(
        'Setting log level on %r to %s (%d)',
        logger.name, level_name, log_level)
    logger.setLevel(log_level)


def configure(handler=None, cfg=config):
    """
    Install a handler on the root logger, formatted as configured in the
    [logging] section.
    """
    if handler is None:
        handler = logging.StreamHandler()

    fmt = cfg.get('logging', 'format')
    if cfg.getboolean('logging', 'use_local_timezone'):
        formatter = TimezoneFormatter(fmt)
    else:
        formatter = logging.Formatter(fmt)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.addHandler(handler)
    set_level(cfg.get('logging', 'level'))
    return handler
