"""Site resolution for the current employee"""
from .models import Site, User

# Roles that see every active site, not only their assigned ones
PRIVILEGED_ROLES = {'propietario', 'gerente_general'}


def role_options():
    """Role value/label pairs for selectors"""
    return [{'value': value, 'label': label} for value, label in User.ROLE_CHOICES]


def normalize_sites(rows):
    """
    Flatten employee-site rows into [{'id', 'name'}].

    Rows use the employee_sites -> sites join shape of the hosted database's
    REST API, where the embedded 'sites' value comes back as a dict or as a
    list of dicts (first one wins) depending on how the relation is read, or
    is missing for deleted sites. Rows without a site are skipped.
    sites_for_user builds the dict form from the ORM so both sources share
    one code path.
    """
    result = []
    for row in rows or []:
        site = row.get('sites')
        if isinstance(site, (list, tuple)):
            site = site[0] if site else None
        if site:
            result.append({'id': site['id'], 'name': site['name']})
    return result


def sites_for_user(user):
    """Sites available to ``user`` as [{'id', 'name'}]"""
    if user.is_superuser or user.role in PRIVILEGED_ROLES:
        return [{'id': site.id, 'name': site.name} for site in Site.objects.filter(is_active=True)]

    rows = (
        user.employee_sites
        .filter(site__is_active=True)
        .select_related('site')
        .order_by('-is_primary', 'site__name')
    )
    return normalize_sites(
        {'site_id': row.site_id, 'sites': {'id': row.site.id, 'name': row.site.name}}
        for row in rows
    )
