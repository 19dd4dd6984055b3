"""
Test suites package.

Kept importable so unit suites can share the browser doubles in
`testsuites.helpers`. Nothing in the suite talks to a real org.
"""
