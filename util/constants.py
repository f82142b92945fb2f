class InternalURIs:
    API = "/api"
    V1 = API + "/v1"

    # Public site
    CATEGORIES = V1 + "/categories"
    PORTFOLIO = V1 + "/portfolio"
    PORTFOLIO_NEIGHBORS = PORTFOLIO + "/{item_id}/neighbors"
    PORTFOLIO_CLICK = PORTFOLIO + "/{item_id}/click"
    FAQS = V1 + "/faqs"
    REVIEWS = V1 + "/reviews"
    ACHIEVEMENTS = V1 + "/achievements"
    AB_TESTS = V1 + "/ab-tests"
    TIME_ESTIMATE = V1 + "/time-estimate"
    VISIT = V1 + "/visit"
    PRIVATE_ACCESS = V1 + "/private/access"
    PRIVATE_SUBMISSIONS = V1 + "/private/submissions"
    MEDIA = V1 + "/media/{bucket}/{path:path}"

    # Admin panel
    ADMIN = V1 + "/admin"
    ADMIN_LOGIN = ADMIN + "/auth/login"
    ADMIN_LOGOUT = ADMIN + "/auth/logout"
    ADMIN_SESSION = ADMIN + "/auth/session"
    ADMIN_DASHBOARD = ADMIN + "/dashboard"
    ADMIN_ANALYTICS = ADMIN + "/analytics"
    ADMIN_ITEMS = ADMIN + "/portfolio-items"
    ADMIN_ITEM = ADMIN_ITEMS + "/{item_id}"
    ADMIN_ITEM_STAR = ADMIN_ITEM + "/star"
    ADMIN_TAG_SUGGESTIONS = ADMIN + "/tags/suggestions"
    ADMIN_PRESET_SEARCH = ADMIN + "/tag-presets/search"
    ADMIN_PRESET_APPLY = ADMIN + "/tag-presets/{preset_id}/apply"
    ADMIN_CATEGORY_VISIBILITY = ADMIN + "/categories/{record_id}/visibility"
    ADMIN_AB_TESTS = ADMIN + "/ab-tests"
    ADMIN_AB_TEST = ADMIN_AB_TESTS + "/{record_id}"
    ADMIN_PROGRESS = ADMIN + "/progress"
    ADMIN_SUBMISSIONS = ADMIN + "/private-submissions"
    ADMIN_SUBMISSION = ADMIN_SUBMISSIONS + "/{record_id}"
    ADMIN_REORDER = ADMIN + "/{kind}/reorder"
    ADMIN_RECORDS = ADMIN + "/content/{kind}"
    ADMIN_RECORD = ADMIN_RECORDS + "/{record_id}"
