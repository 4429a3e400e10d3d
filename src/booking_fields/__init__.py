"""Booking User Fields - custom form fields for booking calendars"""
