from portmap.app import main

main()
