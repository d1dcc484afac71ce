# social_support/options.py
# Fixed option sets for the select/radio fields. Keys are the stored values,
# labels are the English defaults shown by the page.

gender_options: dict[str, str] = {
    'male': 'Male',
    'female': 'Female',
    'other': 'Other',
    'prefer_not_to_say': 'Prefer not to say',
}

marital_status_options: dict[str, str] = {
    'single': 'Single',
    'married': 'Married',
    'divorced': 'Divorced',
    'widowed': 'Widowed',
}

employment_status_options: dict[str, str] = {
    'employed': 'Employed',
    'unemployed': 'Unemployed',
    'self_employed': 'Self-employed',
    'retired': 'Retired',
    'student': 'Student',
    'disabled': 'Disabled',
}

housing_status_options: dict[str, str] = {
    'owned': 'Owned',
    'rented': 'Rented',
    'living_with_family': 'Living with family',
    'homeless': 'Homeless',
    'temporary_housing': 'Temporary housing',
}
