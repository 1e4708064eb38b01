from django.contrib import admin

# Branding for the OD portal admin (directory data is maintained here)

admin.site.site_title = 'OD Portal Admin'
admin.site.site_header = 'OD Portal Administration'
admin.site.index_title = 'Dashboard'
