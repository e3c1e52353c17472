from dynamiclinks.dao.base.shortened_url_base_dao import ShortenedURLBaseDAO


__all__ = ['ShortenedURLBaseDAO']
