from commandy.services.port_authority import PortAuthorityClient, PortAuthorityError

__all__ = ["PortAuthorityClient", "PortAuthorityError"]
