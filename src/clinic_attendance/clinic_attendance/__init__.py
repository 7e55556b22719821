"""Clinic attendance package.

Doctor and employee check-in/check-out records kept in a shared key-value
store, with duplicate prevention and check-out ordering rules. Organized by
feature modules with a thin Flask controller layer over service/store layers.
"""
