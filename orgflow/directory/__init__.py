from .membership import MembershipDirectory, TenantContext
