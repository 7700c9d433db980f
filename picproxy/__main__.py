from .tools.proxy_tools import main

main()
