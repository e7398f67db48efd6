from .config import load_company_profile


def company(request):
    return {"company": load_company_profile()}
