"""
End-to-end UI test kit for the ThesisApp Android application.
"""
