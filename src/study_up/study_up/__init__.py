"""Study-UP backend package.

Organized by feature modules (users, studies, attendance, progress, chat, ...)
with a thin Flask controller layer over service and repository layers.
"""
