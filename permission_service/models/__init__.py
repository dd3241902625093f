from permission_service.models.permission import Permission
