"""This module provides the file watching interface used by the reload loop.

The reload loop never talks to watchdog directly. Instead the watchdog
observer is wrapped in a ``Watcher`` object which exposes three things: a way
to subscribe a single directory, a way to close every subscription at once,
and a queue onto which change and error notifications are delivered.

Subscriptions are deliberately non-recursive. Walking the tree and deciding
which directories are worth watching is done by the registrar, so hidden
directories such as ``.git`` never get a watch of their own. Directories
created after startup are not picked up.
"""
