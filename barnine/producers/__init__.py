"""Update producers.

Each producer is a coroutine taking the update channel; the supervisor runs
one task per producer.
"""
